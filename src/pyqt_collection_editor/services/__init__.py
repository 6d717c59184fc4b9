"""
Service layer for collection editing.

Drag reordering, debounced persistence, search and Qt signal helpers.
"""

from .reorder_controller import ReorderController
from .persistence_adapter import PersistenceAdapter, LoadOutcome
from .search_service import ItemSearchService, SearchHit, count_words, strip_markup
from .signal_service import SignalService

__all__ = [
    "ReorderController",
    "PersistenceAdapter",
    "LoadOutcome",
    "ItemSearchService",
    "SearchHit",
    "count_words",
    "strip_markup",
    "SignalService",
]
