"""
Application-facing configuration hooks.
"""

from .editor_config import EditorConfig, set_editor_config, get_editor_config

__all__ = [
    "EditorConfig",
    "set_editor_config",
    "get_editor_config",
]
