"""
History Manager - bounded linear undo/redo over item snapshots.

Only item data is tracked; selection never enters a snapshot.
"""

import copy
import logging
from typing import List

from pyqt_collection_editor.model.exceptions import NothingToRedo, NothingToUndo
from pyqt_collection_editor.model.items import Snapshot

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_DEPTH = 25


class HistoryManager:
    """
    Two-stack history: ``past`` (most recent last) and ``future`` (next redo last).

    Both stacks are capped at ``max_depth``; the oldest entries fall off first.

    Usage:
        before = store.snapshot()
        store.add(item)
        history.commit(before)

        store.restore(history.undo(store.snapshot()))
    """

    def __init__(self, max_depth: int = DEFAULT_HISTORY_DEPTH):
        if max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {max_depth}")
        self._max_depth = max_depth
        self._past: List[Snapshot] = []
        self._future: List[Snapshot] = []

    @property
    def max_depth(self) -> int:
        return self._max_depth

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    @property
    def depth(self) -> int:
        """Number of undoable steps currently retained."""
        return len(self._past)

    def commit(self, before: Snapshot) -> None:
        """Record the state preceding a discrete action and invalidate redo."""
        self._push(self._past, before)
        self._future.clear()

    def undo(self, current: Snapshot) -> Snapshot:
        """Return the state to restore; ``current`` becomes redoable."""
        if not self._past:
            raise NothingToUndo()
        previous = self._past.pop()
        self._push(self._future, current)
        logger.debug(f"Undo: {len(self._past)} past, {len(self._future)} future")
        return previous

    def redo(self, current: Snapshot) -> Snapshot:
        """Return the state to restore; ``current`` becomes undoable."""
        if not self._future:
            raise NothingToRedo()
        following = self._future.pop()
        self._push(self._past, current)
        logger.debug(f"Redo: {len(self._past)} past, {len(self._future)} future")
        return following

    def reset(self) -> None:
        self._past.clear()
        self._future.clear()

    def _push(self, stack: List[Snapshot], snapshot: Snapshot) -> None:
        stack.append(copy.deepcopy(tuple(snapshot)))
        if len(stack) > self._max_depth:
            del stack[:len(stack) - self._max_depth]
