"""Base configuration class for collection editors.

Provides hooks for applications to customize editor behavior.
"""

from typing import Optional
from dataclasses import dataclass


@dataclass
class EditorConfig:
    """Base configuration for collection editor behavior.

    Applications can subclass this to provide custom configuration.
    Explicit constructor arguments on kernel components take precedence.

    Attributes:
        debounce_ms: Quiet window before a scheduled save is written
        history_depth: Maximum retained undo (and redo) steps
        storage_dir: Directory for the JSON file medium (None = in-memory)
        key_prefix: Namespace prefix for storage keys
        search_min_chars: Minimum search term length that triggers matching
        duplicate_suffix: Appended to the title of duplicated items
        default_item_title: Title used when an item is added without one
    """

    debounce_ms: int = 500
    history_depth: int = 25
    storage_dir: Optional[str] = None
    key_prefix: str = "collection"
    search_min_chars: int = 2
    duplicate_suffix: str = " (Copy)"
    default_item_title: str = "Untitled"
    log_dir: Optional[str] = None
    log_prefix: str = "collection_editor_"
    log_level: str = "INFO"


# Global config instance (set by application)
_editor_config: Optional[EditorConfig] = None


def set_editor_config(config: Optional[EditorConfig]) -> None:
    """Set the global editor configuration.

    Args:
        config: EditorConfig instance, or None to restore defaults
    """
    global _editor_config
    _editor_config = config


def get_editor_config() -> EditorConfig:
    """Get the current editor configuration.

    Returns:
        Current EditorConfig or default if not set
    """
    if _editor_config is None:
        return EditorConfig()
    return _editor_config
