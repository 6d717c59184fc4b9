"""
Item Store - canonical ordered sequence of user-authored items.

Pure data operations with order determinism. List position is the item's
order; nothing outside the owning kernel mutates a store directly.

Framework-agnostic - no Qt imports.
"""

import copy
import itertools
import logging
import secrets
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from pyqt_collection_editor.model.exceptions import (
    DuplicateIdError,
    IndexOutOfRangeError,
    InvalidPatchError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

# Fields a patch may never touch
RESERVED_FIELDS = frozenset({"id", "order", "created_at", "updated_at"})
# Fields applied directly; any other key lands in metadata
ITEM_FIELDS = frozenset({"title", "body", "metadata"})


def utc_now() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Item:
    """
    One user-authored unit (chapter, beat, card).

    Attributes:
        id: Stable identity, unique within a collection
        title: Display title
        body: Opaque payload supplied by the body editor
        created_at: ISO-8601 creation timestamp
        updated_at: ISO-8601 timestamp of the last mutation touching this item
        metadata: Caller-specific fields (status, bookmarks, tags, ...)
    """
    id: str = ""
    title: str = ""
    body: Any = None
    created_at: str = ""
    updated_at: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


# Immutable deep copy of an item sequence
Snapshot = Tuple[Item, ...]


class IdGenerator:
    """
    Issues ids unique for the lifetime of one collection.

    Counter plus random suffix; any id issued or reserved is never handed out again,
    including after the item carrying it was deleted.
    """

    def __init__(self, prefix: str = "item"):
        self._prefix = prefix
        self._counter = itertools.count(1)
        self._seen: Set[str] = set()

    def reserve(self, item_id: str) -> None:
        """Mark an externally supplied id as used."""
        self._seen.add(item_id)

    def __call__(self) -> str:
        while True:
            candidate = f"{self._prefix}-{next(self._counter)}-{secrets.token_hex(3)}"
            if candidate not in self._seen:
                self._seen.add(candidate)
                return candidate


class ItemStore:
    """
    Ordered item collection with id uniqueness and atomic batch removal.

    Every successful mutation stamps ``updated_at`` on the affected items only.
    Failing calls raise and leave the store unchanged.
    """

    def __init__(self, id_generator: Optional[IdGenerator] = None,
                 clock: Optional[Callable[[], str]] = None):
        self._items: List[Item] = []
        self._id_generator = id_generator or IdGenerator()
        self._clock = clock or utc_now

    # ========== Queries ==========

    def all(self) -> Tuple[Item, ...]:
        """Read-only view of the items in order."""
        return tuple(self._items)

    def ids(self) -> List[str]:
        return [item.id for item in self._items]

    def get(self, item_id: str) -> Item:
        return self._items[self.index_of(item_id)]

    def index_of(self, item_id: str) -> int:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        raise NotFoundError(item_id)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return any(item.id == item_id for item in self._items)

    # ========== Mutations ==========

    def add(self, item: Item, position: Optional[int] = None) -> Item:
        """
        Insert an item, generating an id when none is supplied.

        Args:
            item: Item to insert (``id`` may be empty)
            position: Insert index in ``[0, len]``; None appends

        Returns:
            The stored item (with id and timestamps filled in)
        """
        if position is not None and (isinstance(position, bool) or not isinstance(position, int)
                                     or not 0 <= position <= len(self._items)):
            raise IndexOutOfRangeError(position, len(self._items))

        if item.id:
            if item.id in self:
                raise DuplicateIdError(item.id)
            self._id_generator.reserve(item.id)
            item_id = item.id
        else:
            item_id = self._id_generator()

        now = self._clock()
        stored = replace(
            item,
            id=item_id,
            created_at=item.created_at or now,
            updated_at=now,
            metadata=copy.deepcopy(item.metadata),
        )
        if position is None:
            self._items.append(stored)
        else:
            self._items.insert(position, stored)
        logger.debug(f"Added item {item_id!r} at {len(self._items) - 1 if position is None else position}")
        return stored

    def remove(self, ids: Iterable[str]) -> List[Item]:
        """Remove a batch of ids atomically and return the removed items in store order."""
        wanted = list(dict.fromkeys(ids))
        present = set(self.ids())
        missing = [item_id for item_id in wanted if item_id not in present]
        if missing:
            raise NotFoundError(missing)

        wanted_set = set(wanted)
        removed = [item for item in self._items if item.id in wanted_set]
        self._items = [item for item in self._items if item.id not in wanted_set]
        logger.debug(f"Removed {len(removed)} item(s)")
        return removed

    def check_patch(self, item_id: str, patch: Mapping[str, Any]) -> int:
        """Validate a patch against one item without applying it; returns its index."""
        reserved = RESERVED_FIELDS.intersection(patch)
        if reserved:
            raise InvalidPatchError(f"Cannot patch reserved field(s): {', '.join(sorted(reserved))}")
        return self.index_of(item_id)

    def update(self, item_id: str, patch: Mapping[str, Any]) -> Item:
        """
        Merge a partial patch into one item.

        ``title``/``body`` replace, ``metadata`` is shallow-merged, and any other
        non-reserved key is merged into ``metadata``.
        """
        index = self.check_patch(item_id, patch)
        current = self._items[index]

        metadata = copy.deepcopy(current.metadata)
        metadata.update(copy.deepcopy(dict(patch.get("metadata") or {})))
        for key, value in patch.items():
            if key not in ITEM_FIELDS:
                metadata[key] = copy.deepcopy(value)

        changes: Dict[str, Any] = {"metadata": metadata, "updated_at": self._clock()}
        if "title" in patch:
            changes["title"] = patch["title"]
        if "body" in patch:
            changes["body"] = copy.deepcopy(patch["body"])

        updated = replace(current, **changes)
        self._items[index] = updated
        return updated

    def reorder(self, from_index: int, to_index: int) -> None:
        """Move exactly one element; equal indices are a successful no-op."""
        size = len(self._items)
        for index in (from_index, to_index):
            if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < size:
                raise IndexOutOfRangeError(index, size)
        if from_index == to_index:
            return

        item = self._items.pop(from_index)
        self._items.insert(to_index, replace(item, updated_at=self._clock()))

    # ========== Snapshots ==========

    def snapshot(self) -> Snapshot:
        """Deep copy of the current sequence, independent of the live store."""
        return copy.deepcopy(tuple(self._items))

    def restore(self, snapshot: Iterable[Item]) -> None:
        """Replace the whole sequence with a deep copy of ``snapshot``."""
        items = copy.deepcopy(list(snapshot))
        seen: Set[str] = set()
        for item in items:
            if item.id in seen:
                raise DuplicateIdError(item.id)
            seen.add(item.id)
            self._id_generator.reserve(item.id)
        self._items = items
