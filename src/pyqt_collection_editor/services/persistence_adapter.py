"""
Persistence Adapter - debounced durable saves plus import/export.

The adapter is bound to exactly one storage key. Saves are coalesced by a
single DebounceTimer: each schedule_save() cancels the pending write and
reschedules it with the newest state.

Write failures are terminal for that attempt and never retried here. A failed
flush() raises to its caller; a failed debounced write has no caller, so it is
reported through ``on_error`` instead. Each failure surfaces exactly once.
"""

import copy
import logging
from pathlib import Path
from typing import Callable, Iterable, List, Mapping, NamedTuple, Optional, Tuple, Union

from pyqt_collection_editor.core.debounce_timer import DebounceTimer, TimerScheduler
from pyqt_collection_editor.io.base import KeyValueStore
from pyqt_collection_editor.io.document import (
    PersistedDocument,
    parse_document,
    read_document_file,
    write_document_file,
)
from pyqt_collection_editor.io.exceptions import (
    CorruptStorageError,
    InvalidDocumentError,
    StorageWriteError,
)
from pyqt_collection_editor.model.exceptions import CollectionEditorError
from pyqt_collection_editor.model.items import Item, utc_now
from pyqt_collection_editor.protocols import get_editor_config

logger = logging.getLogger(__name__)

DocumentSource = Union[str, bytes, Mapping, PersistedDocument]


class LoadOutcome(NamedTuple):
    """Result of reading the durable medium.

    ``(None, None)`` means nothing stored yet; ``(None, error)`` means the stored
    content was unusable.
    """
    document: Optional[PersistedDocument]
    error: Optional[CorruptStorageError]


class PersistenceAdapter:
    """
    Serializes item sequences to a KeyValueStore under one key.

    Args:
        medium: Durable key-value backend
        key: Storage key this adapter owns
        debounce_ms: Quiet window before writing (default from EditorConfig)
        scheduler: Timer queue for the debounce (default: Qt event loop)
        on_saved: Called with the written document after each successful write
        on_error: Called with the StorageWriteError of a failed debounced write
        clock: Returns the ISO-8601 ``savedAt`` stamp
    """

    def __init__(
        self,
        medium: KeyValueStore,
        key: str,
        debounce_ms: Optional[int] = None,
        scheduler: Optional[TimerScheduler] = None,
        on_saved: Optional[Callable[[PersistedDocument], None]] = None,
        on_error: Optional[Callable[[CollectionEditorError], None]] = None,
        clock: Optional[Callable[[], str]] = None,
    ):
        if not key:
            raise ValueError("PersistenceAdapter requires a storage key")
        if debounce_ms is None:
            debounce_ms = get_editor_config().debounce_ms
        self._medium = medium
        self._key = key
        self._clock = clock or utc_now
        self.on_saved = on_saved
        self.on_error = on_error
        self._pending: Optional[Tuple[Item, ...]] = None
        self._debounce = DebounceTimer(debounce_ms, self._on_timer, scheduler)

    @property
    def key(self) -> str:
        return self._key

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    # ========== Saving ==========

    def schedule_save(self, items: Iterable[Item]) -> None:
        """Replace the pending state with ``items`` and restart the quiet window."""
        self._pending = copy.deepcopy(tuple(items))
        self._debounce.trigger()
        logger.debug(f"Scheduled save of {len(self._pending)} item(s) to {self._key!r}")

    def flush(self) -> bool:
        """
        Write the pending state now.

        Returns:
            True if a write happened, False if nothing was pending

        Raises:
            StorageWriteError: The medium rejected the write
        """
        self._debounce.cancel()
        return self._write_pending()

    def cancel(self) -> None:
        """Drop the pending write without saving."""
        self._debounce.cancel()
        self._pending = None

    def _on_timer(self) -> None:
        try:
            self._write_pending()
        except StorageWriteError as e:
            # Nothing above the event loop to raise into
            if self.on_error is not None:
                self.on_error(e)

    def _write_pending(self) -> bool:
        if self._pending is None:
            return False
        items, self._pending = self._pending, None
        document = PersistedDocument.from_items(items, saved_at=self._clock())

        try:
            payload = document.to_json()
        except (TypeError, ValueError) as e:
            logger.error(f"Save to {self._key!r} failed: {e}", exc_info=e)
            raise StorageWriteError(f"Items for {self._key!r} are not serializable: {e}") from e

        try:
            self._medium.set(self._key, payload)
        except StorageWriteError as e:
            logger.error(f"Save to {self._key!r} failed: {e}", exc_info=e)
            raise
        except OSError as e:
            logger.error(f"Save to {self._key!r} failed: {e}", exc_info=e)
            raise StorageWriteError(f"Write to {self._key!r} failed: {e}") from e

        logger.info(f"Saved {len(items)} item(s) to {self._key!r}")
        if self.on_saved is not None:
            self.on_saved(document)
        return True

    # ========== Loading ==========

    def load(self) -> LoadOutcome:
        """Read the stored document without ever raising into the caller."""
        try:
            raw = self._medium.get(self._key)
        except (OSError, UnicodeDecodeError) as e:
            error = CorruptStorageError(self._key, f"unreadable: {e}")
            logger.warning(str(error))
            return LoadOutcome(None, error)
        if raw is None:
            return LoadOutcome(None, None)

        try:
            document = parse_document(raw)
        except InvalidDocumentError as e:
            error = CorruptStorageError(self._key, str(e))
            logger.warning(str(error))
            return LoadOutcome(None, error)

        logger.info(f"Loaded {len(document.items)} item(s) from {self._key!r}")
        return LoadOutcome(document, None)

    # ========== Import / export ==========

    def export_document(self, items: Iterable[Item]) -> PersistedDocument:
        """Item data and a save timestamp only; no selection, no history."""
        return PersistedDocument.from_items(copy.deepcopy(tuple(items)), saved_at=self._clock())

    def import_document(self, document: DocumentSource) -> List[Item]:
        """
        Validate an import document and return its items.

        Raises:
            InvalidDocumentError: Shape mismatch (the caller's collection is untouched)
        """
        try:
            parsed = parse_document(document)
        except InvalidDocumentError as e:
            logger.warning(f"Rejected import document: {e}")
            raise
        return list(parsed.items)

    def export_to_file(self, items: Iterable[Item], path: Union[str, Path]) -> Path:
        """Write an export file (same shape as the stored document)."""
        document = self.export_document(items)
        path = write_document_file(document, path)
        logger.info(f"Exported {len(document.items)} item(s) to {path}")
        return path

    def import_from_file(self, path: Union[str, Path]) -> List[Item]:
        """Read and validate a user-selected import file."""
        try:
            document = read_document_file(path)
        except InvalidDocumentError as e:
            logger.warning(f"Rejected import file {path}: {e}")
            raise
        return list(document.items)
