"""
Core Log Utilities for pyqt-collection-editor.

Log file setup and discovery shared between the kernel and UI layers.
"""

import logging
import time
from pathlib import Path
from typing import Optional, List
from dataclasses import dataclass

from pyqt_collection_editor.protocols import EditorConfig, get_editor_config

logger = logging.getLogger(__name__)

PACKAGE_LOGGER_NAME = "pyqt_collection_editor"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _get_log_dir(config: Optional[EditorConfig] = None) -> Path:
    """Return configured log directory or default."""
    config = config or get_editor_config()
    if config.log_dir:
        return Path(config.log_dir)
    return Path.home() / ".local" / "share" / "pyqt_collection_editor" / "logs"


def configure_logging(config: Optional[EditorConfig] = None) -> Path:
    """
    Attach a file handler to the package logger.

    Idempotent: a second call returns the already configured file.

    Returns:
        Path of the log file receiving package records
    """
    config = config or get_editor_config()
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)

    for handler in package_logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)

    log_dir = _get_log_dir(config)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / f"{config.log_prefix}{int(time.time())}.log"

    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
    logger.info(f"Logging to {log_path}")
    return log_path


def get_current_log_file_path() -> Optional[str]:
    """Get the current log file path from the logging system, if a file handler exists."""
    for logger_name in (PACKAGE_LOGGER_NAME, None):
        for handler in logging.getLogger(logger_name).handlers:
            if isinstance(handler, logging.FileHandler):
                return handler.baseFilename
    return None


@dataclass
class LogFileInfo:
    """Information about a discovered log file."""
    path: Path
    display_name: Optional[str] = None

    def __post_init__(self):
        """Generate display name if not provided."""
        if not self.display_name:
            self.display_name = self.path.name


def is_app_log_file(file_path: Path, config: Optional[EditorConfig] = None) -> bool:
    """
    Check if a file is a recognized application log file.

    Args:
        file_path: Path to file to check
        config: Configuration providing the log prefix

    Returns:
        bool: True if file matches the configured log prefix
    """
    config = config or get_editor_config()
    return file_path.name.endswith(".log") and file_path.name.startswith(config.log_prefix)


def discover_logs(log_directory: Optional[Path] = None,
                  config: Optional[EditorConfig] = None) -> List[LogFileInfo]:
    """
    Discover application log files, newest first.

    Args:
        log_directory: Directory to search (defaults to configured log directory)
        config: Configuration providing directory and prefix

    Returns:
        List of LogFileInfo objects for discovered log files
    """
    log_directory = log_directory or _get_log_dir(config)
    if not log_directory.exists():
        return []

    logs = [
        LogFileInfo(path)
        for path in log_directory.glob("*.log")
        if is_app_log_file(path, config)
    ]
    logs.sort(key=lambda info: info.path.stat().st_mtime, reverse=True)
    return logs
