"""
Collection data model.

Pure Python state containers with no Qt dependency: the ordered item store,
selection, undo/redo history, change results and the error taxonomy.
"""

from .exceptions import (
    CollectionEditorError,
    DuplicateIdError,
    NotFoundError,
    IndexOutOfRangeError,
    InvalidPatchError,
    NothingToUndo,
    NothingToRedo,
)
from .items import Item, ItemStore, IdGenerator, Snapshot
from .selection import SelectionModel
from .history import HistoryManager, DEFAULT_HISTORY_DEPTH
from .results import ChangeKind, ChangeEvent, EditResult

__all__ = [
    "CollectionEditorError",
    "DuplicateIdError",
    "NotFoundError",
    "IndexOutOfRangeError",
    "InvalidPatchError",
    "NothingToUndo",
    "NothingToRedo",
    "Item",
    "ItemStore",
    "IdGenerator",
    "Snapshot",
    "SelectionModel",
    "HistoryManager",
    "DEFAULT_HISTORY_DEPTH",
    "ChangeKind",
    "ChangeEvent",
    "EditResult",
]
