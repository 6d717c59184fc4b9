"""
Core PyQt6 utilities.

Timer, list widget and logging helpers with no collection-specific logic.
"""

from .debounce_timer import DebounceTimer, QtTimerScheduler, TimerScheduler
from .reorderable_list_widget import ReorderableListWidget
from .log_utils import configure_logging, get_current_log_file_path, discover_logs, LogFileInfo

__all__ = [
    "DebounceTimer",
    "QtTimerScheduler",
    "TimerScheduler",
    "ReorderableListWidget",
    "configure_logging",
    "get_current_log_file_path",
    "discover_logs",
    "LogFileInfo",
]
