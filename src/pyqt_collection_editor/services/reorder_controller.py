"""
Reorder Controller - turns a drag gesture into live item moves.

Gesture model:
    drag_start(id)      record source and a baseline snapshot
    drag_over(target)   move the source onto the hovered position immediately
    drop()              end gesture; baseline returned for a single history commit
    cancel()            end gesture; baseline restored, nothing committed

Between events the store is always a valid permutation of the baseline, so an
abandoned gesture never leaves partial state behind.
"""

import logging
from typing import Optional

from pyqt_collection_editor.model.items import ItemStore, Snapshot

logger = logging.getLogger(__name__)


class ReorderController:
    """Hover-swaps-position reordering over one ItemStore."""

    def __init__(self, store: ItemStore):
        self._store = store
        self._source_id: Optional[str] = None
        self._source_index: Optional[int] = None
        self._baseline: Optional[Snapshot] = None

    @property
    def is_dragging(self) -> bool:
        return self._source_id is not None

    @property
    def source_id(self) -> Optional[str]:
        return self._source_id

    @property
    def source_index(self) -> Optional[int]:
        return self._source_index

    def drag_start(self, item_id: str) -> None:
        """Begin a gesture on ``item_id``; an unfinished gesture is cancelled first."""
        index = self._store.index_of(item_id)
        if self.is_dragging:
            logger.debug(f"Drag of {self._source_id!r} abandoned by new drag")
            self.cancel()
        self._source_id = item_id
        self._source_index = index
        self._baseline = self._store.snapshot()
        logger.debug(f"Drag start {item_id!r} at {index}")

    def drag_over(self, target_id: str) -> bool:
        """
        Move the dragged item to the hovered item's position.

        Returns:
            True if the store changed
        """
        if not self.is_dragging or target_id == self._source_id:
            return False

        target_index = self._store.index_of(target_id)
        # Recover from anything that moved the source behind our back
        ids = self._store.ids()
        if self._source_index >= len(ids) or ids[self._source_index] != self._source_id:
            self._source_index = self._store.index_of(self._source_id)

        self._store.reorder(self._source_index, target_index)
        logger.debug(f"Drag {self._source_id!r}: {self._source_index} -> {target_index}")
        self._source_index = target_index
        return True

    def drop(self) -> Optional[Snapshot]:
        """
        Finish the gesture.

        Returns:
            The pre-drag snapshot if the order changed (commit it once), else None
        """
        if not self.is_dragging:
            return None
        baseline = self._baseline
        changed = [item.id for item in baseline] != self._store.ids()
        self._reset()
        logger.debug(f"Drop ({'changed' if changed else 'unchanged'})")
        return baseline if changed else None

    def cancel(self) -> bool:
        """Restore the pre-drag order. Returns True if a gesture was active."""
        if not self.is_dragging:
            return False
        self._store.restore(self._baseline)
        self._reset()
        logger.debug("Drag cancelled, order restored")
        return True

    def _reset(self) -> None:
        self._source_id = None
        self._source_index = None
        self._baseline = None
