"""
Selection Model - multi-item selection with a shift-click anchor.

Click semantics follow the usual list conventions:
- plain click replaces the selection
- ctrl/cmd click toggles membership
- shift click selects the contiguous range from the anchor
"""

import logging
from typing import Callable, FrozenSet, Iterable, List, Optional, Sequence

from pyqt_collection_editor.model.exceptions import IndexOutOfRangeError, NotFoundError

logger = logging.getLogger(__name__)


class SelectionModel:
    """
    Tracks selected item ids and the range anchor.

    The anchor is stored as an item id and resolved to an index on demand, so a
    reorder moves the anchor together with its item.

    Args:
        ordered_ids: Callable returning the collection's ids in order
    """

    def __init__(self, ordered_ids: Callable[[], Sequence[str]]):
        self._ordered_ids = ordered_ids
        self._selected: set = set()
        self._anchor_id: Optional[str] = None

    # ========== Queries ==========

    def ids(self) -> FrozenSet[str]:
        return frozenset(self._selected)

    def ordered_ids(self) -> List[str]:
        """Selected ids in collection order."""
        return [item_id for item_id in self._ordered_ids() if item_id in self._selected]

    def is_selected(self, item_id: str) -> bool:
        return item_id in self._selected

    @property
    def anchor_id(self) -> Optional[str]:
        return self._anchor_id

    @property
    def anchor_index(self) -> Optional[int]:
        if self._anchor_id is None:
            return None
        ids = list(self._ordered_ids())
        return ids.index(self._anchor_id) if self._anchor_id in ids else None

    def __len__(self) -> int:
        return len(self._selected)

    # ========== Click handling ==========

    def toggle(self, item_id: str, additive: bool = False) -> None:
        """
        Handle a click on ``item_id``.

        Args:
            item_id: Clicked item
            additive: True for ctrl/cmd-click (flip membership), False for plain click
        """
        if item_id not in self._ordered_ids():
            raise NotFoundError(item_id)

        if additive:
            if item_id in self._selected:
                self._selected.discard(item_id)
            else:
                self._selected.add(item_id)
        else:
            self._selected = {item_id}
        self._anchor_id = item_id

    def select_range(self, to_index: int) -> None:
        """Select the inclusive range between the anchor and ``to_index``."""
        ids = list(self._ordered_ids())
        if isinstance(to_index, bool) or not isinstance(to_index, int) or not 0 <= to_index < len(ids):
            raise IndexOutOfRangeError(to_index, len(ids))

        anchor_index = self.anchor_index
        if anchor_index is None:
            # No anchor yet: behave like a plain click
            self.toggle(ids[to_index])
            return

        low, high = sorted((anchor_index, to_index))
        self._selected = set(ids[low:high + 1])

    def select_all(self) -> None:
        self._selected = set(self._ordered_ids())

    def clear(self) -> None:
        self._selected.clear()
        self._anchor_id = None

    # ========== Consistency with the item store ==========

    def prune(self, removed_ids: Iterable[str]) -> None:
        """Forget ids that were just deleted, dropping the anchor if it was one of them."""
        removed = set(removed_ids)
        self._selected -= removed
        if self._anchor_id in removed:
            logger.debug(f"Anchor {self._anchor_id!r} deleted, clearing anchor")
            self._anchor_id = None

    def retain(self, valid_ids: Iterable[str]) -> None:
        """Drop every selected id (and the anchor) not present in ``valid_ids``."""
        valid = set(valid_ids)
        self.prune([item_id for item_id in self._selected if item_id not in valid])
        if self._anchor_id is not None and self._anchor_id not in valid:
            self._anchor_id = None
