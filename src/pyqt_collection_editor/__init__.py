"""
pyqt-collection-editor: ordered collection editing kernel for PyQt6.

Manages an ordered list of user-owned items (chapters, steps, slides) with
multi-selection, drag reordering, bounded undo/redo and debounced durable
persistence, behind one kernel API that list widgets bind to.

Architecture:
- Tier 1 (Model): ItemStore, SelectionModel, HistoryManager, error taxonomy
- Tier 2 (IO): PersistedDocument codec and key-value storage media
- Tier 3 (Services): ReorderController, PersistenceAdapter, search
- Tier 4 (Kernel): CollectionEditorKernel orchestrating the above
- Tier 5 (Widgets): CollectionManagerWidget, a thin Qt adapter
"""

__version__ = "0.1.0"

from .model import (
    Item,
    ItemStore,
    SelectionModel,
    HistoryManager,
    ChangeKind,
    ChangeEvent,
    EditResult,
    CollectionEditorError,
)
from .io import PersistedDocument, MemoryStore, JsonFileStore, QSettingsStore, project_key
from .protocols import EditorConfig, set_editor_config, get_editor_config
from .services import PersistenceAdapter, ReorderController, ItemSearchService
from .kernel import CollectionEditorKernel, create_kernel

__all__ = [
    "__version__",
    "Item",
    "ItemStore",
    "SelectionModel",
    "HistoryManager",
    "ChangeKind",
    "ChangeEvent",
    "EditResult",
    "CollectionEditorError",
    "PersistedDocument",
    "MemoryStore",
    "JsonFileStore",
    "QSettingsStore",
    "project_key",
    "EditorConfig",
    "set_editor_config",
    "get_editor_config",
    "PersistenceAdapter",
    "ReorderController",
    "ItemSearchService",
    "CollectionEditorKernel",
    "create_kernel",
]
