"""
Collection Editor Kernel - single API surface for ordered collection editors.

Composes ItemStore, SelectionModel, HistoryManager, ReorderController and an
optional PersistenceAdapter. Presentation code binds UI events to kernel calls
and renders the returned EditResult; it never touches the components directly.

Flow of a discrete action:
    settle drag -> commit coalesced edits -> snapshot -> mutate -> history commit
    -> schedule save -> notify subscribers -> EditResult

Every error of the CollectionEditorError taxonomy is caught here and returned
as ``EditResult.error``; nothing from that taxonomy propagates further.
"""

import functools
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

from pyqt_collection_editor.core.debounce_timer import TimerScheduler
from pyqt_collection_editor.io.base import KeyValueStore, project_key
from pyqt_collection_editor.io.document import (
    PersistedDocument,
    parse_document,
    read_document_file,
    write_document_file,
)
from pyqt_collection_editor.io.stores import JsonFileStore, MemoryStore
from pyqt_collection_editor.model.exceptions import CollectionEditorError
from pyqt_collection_editor.model.history import HistoryManager
from pyqt_collection_editor.model.items import Item, ItemStore, Snapshot
from pyqt_collection_editor.model.results import ChangeEvent, ChangeKind, EditResult
from pyqt_collection_editor.model.selection import SelectionModel
from pyqt_collection_editor.protocols import get_editor_config
from pyqt_collection_editor.services.persistence_adapter import DocumentSource, PersistenceAdapter
from pyqt_collection_editor.services.reorder_controller import ReorderController

logger = logging.getLogger(__name__)

ChangeListener = Callable[[ChangeEvent], None]
ErrorListener = Callable[[CollectionEditorError], None]


def _guarded(method):
    """Convert taxonomy errors into an unchanged-collection EditResult."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except CollectionEditorError as e:
            if e.informational:
                logger.debug(f"{method.__name__}: {e}")
            else:
                logger.warning(f"{method.__name__} failed: {e}")
            return EditResult(self.items, error=e)
    return wrapper


class CollectionEditorKernel:
    """
    Orchestrator owning one collection for its lifetime.

    Args:
        persistence: Adapter bound to this collection's storage key (None = no saving)
        history_depth: Maximum undo depth (default from EditorConfig)
        store: Pre-built ItemStore (mainly for injecting id generators / clocks)

    Usage:
        kernel = CollectionEditorKernel(PersistenceAdapter(JsonFileStore(path), "chapters"))
        kernel.hydrate()
        kernel.subscribe(lambda event: sidebar.render(event.items))

        result = kernel.add_item("Chapter 1")
        if not result.ok:
            show_toast(str(result.error))
    """

    def __init__(self,
                 persistence: Optional[PersistenceAdapter] = None,
                 history_depth: Optional[int] = None,
                 store: Optional[ItemStore] = None):
        config = get_editor_config()
        self._store = store or ItemStore()
        self._selection = SelectionModel(self._store.ids)
        self._history = HistoryManager(history_depth or config.history_depth)
        self._reorder = ReorderController(self._store)
        self._persistence = persistence
        self._default_title = config.default_item_title
        self._duplicate_suffix = config.duplicate_suffix

        self._listeners: List[ChangeListener] = []
        self._error_listeners: List[ErrorListener] = []
        # State before the first uncommitted live edit
        self._edit_baseline: Optional[Snapshot] = None

        if persistence is not None:
            persistence.on_error = self._emit_error

    # ========== Views ==========

    @property
    def items(self) -> Tuple[Item, ...]:
        return self._store.all()

    @property
    def persistence(self) -> Optional[PersistenceAdapter]:
        return self._persistence

    def selected_ids(self) -> FrozenSet[str]:
        return self._selection.ids()

    def selected_items(self) -> List[Item]:
        """Selected items in collection order."""
        selected = self._selection.ids()
        return [item for item in self._store.all() if item.id in selected]

    def is_selected(self, item_id: str) -> bool:
        return self._selection.is_selected(item_id)

    @property
    def anchor_index(self) -> Optional[int]:
        return self._selection.anchor_index

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo or self._edit_baseline is not None

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo and self._edit_baseline is None

    @property
    def is_dragging(self) -> bool:
        return self._reorder.is_dragging

    @property
    def has_uncommitted_edits(self) -> bool:
        return self._edit_baseline is not None

    # ========== Subscriptions ==========

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """
        Register a change listener; delivery is synchronous, in subscription order.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener) if listener in self._listeners else None

    def on_error(self, listener: ErrorListener) -> Callable[[], None]:
        """Register a listener for background persistence failures."""
        self._error_listeners.append(listener)
        return lambda: self._error_listeners.remove(listener) if listener in self._error_listeners else None

    def _emit_error(self, error: CollectionEditorError) -> None:
        for listener in list(self._error_listeners):
            listener(error)

    def _notify(self, kind: ChangeKind) -> None:
        event = ChangeEvent(kind, self._store.all())
        for listener in list(self._listeners):
            listener(event)

    def _changed(self, kind: ChangeKind) -> None:
        self._schedule_save()
        self._notify(kind)

    def _schedule_save(self) -> None:
        if self._persistence is not None:
            self._persistence.schedule_save(self._store.all())

    # ========== Commit machinery ==========

    def _settle(self) -> None:
        """Close open interactions before a discrete action: drop drags, commit edits."""
        if self._reorder.is_dragging:
            baseline = self._reorder.drop()
            if baseline is not None:
                self._history.commit(baseline)
                self._changed(ChangeKind.REORDER)
        self._commit_edits()

    def _commit_edits(self) -> bool:
        if self._edit_baseline is None:
            return False
        baseline, self._edit_baseline = self._edit_baseline, None
        self._history.commit(baseline)
        self._notify(ChangeKind.UPDATE)
        return True

    def _apply(self, kind: ChangeKind, mutate: Callable[[], Any]) -> EditResult:
        self._settle()
        before = self._store.snapshot()
        value = mutate()
        self._history.commit(before)
        self._changed(kind)
        return EditResult(self.items, value=value)

    def _title_or_default(self, title: Optional[str]) -> str:
        if title is None or not str(title).strip():
            return f"{self._default_title} {len(self._store) + 1}"
        return title

    # ========== Item operations ==========

    @_guarded
    def add_item(self,
                 title: Optional[str] = None,
                 body: Any = None,
                 metadata: Optional[Mapping[str, Any]] = None,
                 item_id: Optional[str] = None,
                 position: Optional[int] = None,
                 prepend: bool = False) -> EditResult:
        """
        Add one item (commit point).

        Args:
            title: Display title; blank titles get a numbered default
            body: Opaque body payload
            metadata: Caller-specific fields
            item_id: Explicit id (generated when omitted)
            position: Insert index; overrides ``prepend``
            prepend: Insert at the front instead of appending

        Returns:
            EditResult whose ``value`` is the new item's id
        """
        item = Item(
            id=item_id or "",
            title=self._title_or_default(title),
            body=body,
            metadata=dict(metadata or {}),
        )
        if position is None and prepend:
            position = 0
        return self._apply(ChangeKind.ADD, lambda: self._store.add(item, position).id)

    @_guarded
    def duplicate_item(self, item_id: str) -> EditResult:
        """Insert a copy right after ``item_id`` with a fresh id (commit point)."""
        index = self._store.index_of(item_id)
        original = self._store.get(item_id)
        copy_item = replace(
            original,
            id="",
            title=f"{original.title}{self._duplicate_suffix}",
            created_at="",
        )
        return self._apply(ChangeKind.ADD, lambda: self._store.add(copy_item, index + 1).id)

    @_guarded
    def remove_items(self, ids: Iterable[str]) -> EditResult:
        """Delete a batch of items atomically (commit point); selection is pruned."""
        ids = list(ids)
        if not ids:
            return EditResult(self.items, value=[])

        def mutate():
            removed = self._store.remove(ids)
            self._selection.prune(item.id for item in removed)
            return [item.id for item in removed]

        return self._apply(ChangeKind.REMOVE, mutate)

    def remove_selected(self) -> EditResult:
        """Delete every selected item; an empty selection is a no-op."""
        ids = self._selection.ordered_ids()
        if not ids:
            return EditResult(self.items, value=[])
        return self.remove_items(ids)

    @_guarded
    def update_item(self, item_id: str, patch: Mapping[str, Any]) -> EditResult:
        """Apply a discrete edit such as a rename (commit point)."""
        patch = self._normalize_patch(patch)
        self._store.check_patch(item_id, patch)
        return self._apply(ChangeKind.UPDATE, lambda: self._store.update(item_id, patch).id)

    @_guarded
    def edit_item(self, item_id: str, patch: Mapping[str, Any]) -> EditResult:
        """
        Apply a live edit (typing) without a history entry.

        Consecutive live edits coalesce into one commit, made at the next
        discrete action, undo, save, or flush_edits().
        """
        patch = self._normalize_patch(patch)
        self._store.check_patch(item_id, patch)
        if self._reorder.is_dragging:
            self._settle()
        before = self._store.snapshot() if self._edit_baseline is None else None
        self._store.update(item_id, patch)
        if before is not None:
            self._edit_baseline = before
        self._schedule_save()
        return EditResult(self.items, value=item_id)

    def flush_edits(self) -> EditResult:
        """Commit coalesced live edits as one undoable step."""
        committed = self._commit_edits()
        if committed:
            self._schedule_save()
        return EditResult(self.items, value=committed)

    def _normalize_patch(self, patch: Mapping[str, Any]) -> Mapping[str, Any]:
        patch = dict(patch)
        # Stored titles are never blank so every saved document stays importable
        if "title" in patch and not str(patch["title"] or "").strip():
            patch["title"] = self._default_title
        return patch

    # ========== Ordering ==========

    @_guarded
    def reorder(self, from_index: int, to_index: int) -> EditResult:
        """Move one item (commit point unless source and target are equal)."""
        if from_index == to_index:
            # Still validates the index
            self._store.reorder(from_index, to_index)
            return EditResult(self.items)
        return self._apply(ChangeKind.REORDER, lambda: self._store.reorder(from_index, to_index))

    @_guarded
    def move_up(self, item_id: str) -> EditResult:
        index = self._store.index_of(item_id)
        if index == 0:
            return EditResult(self.items)
        return self.reorder(index, index - 1)

    @_guarded
    def move_down(self, item_id: str) -> EditResult:
        index = self._store.index_of(item_id)
        if index == len(self._store) - 1:
            return EditResult(self.items)
        return self.reorder(index, index + 1)

    # ========== Drag gestures ==========

    @_guarded
    def drag_start(self, item_id: str) -> EditResult:
        """Begin a gesture; a gesture already in progress is cancelled first."""
        self._store.index_of(item_id)
        self._commit_edits()
        self._reorder.drag_start(item_id)
        return EditResult(self.items, value=item_id)

    @_guarded
    def drag_over(self, target_id: str) -> EditResult:
        """Live move while hovering; not a commit point and not broadcast."""
        moved = self._reorder.drag_over(target_id)
        return EditResult(self.items, value=moved)

    @_guarded
    def drop(self) -> EditResult:
        """Commit the whole gesture as a single undoable step."""
        baseline = self._reorder.drop()
        if baseline is None:
            return EditResult(self.items, value=False)
        self._history.commit(baseline)
        self._changed(ChangeKind.REORDER)
        return EditResult(self.items, value=True)

    def cancel_drag(self) -> EditResult:
        """Restore the pre-drag order without a history entry."""
        cancelled = self._reorder.cancel()
        return EditResult(self.items, value=cancelled)

    # ========== Selection ==========

    @_guarded
    def click(self, item_id: str, additive: bool = False) -> EditResult:
        """Plain click (replace) or ctrl/cmd click (toggle) on an item."""
        self._selection.toggle(item_id, additive)
        return EditResult(self.items, value=self._selection.ids())

    @_guarded
    def select_range(self, to_index: int) -> EditResult:
        """Shift click: select from the anchor to ``to_index`` inclusive."""
        self._selection.select_range(to_index)
        return EditResult(self.items, value=self._selection.ids())

    def select_all(self) -> EditResult:
        self._selection.select_all()
        return EditResult(self.items, value=self._selection.ids())

    def clear_selection(self) -> EditResult:
        self._selection.clear()
        return EditResult(self.items, value=self._selection.ids())

    # ========== History ==========

    @_guarded
    def undo(self) -> EditResult:
        """Restore the previous item state; the selection is kept (and pruned)."""
        self._settle()
        previous = self._history.undo(self._store.snapshot())
        self._restore(previous)
        self._changed(ChangeKind.UNDO)
        return EditResult(self.items)

    @_guarded
    def redo(self) -> EditResult:
        self._settle()
        following = self._history.redo(self._store.snapshot())
        self._restore(following)
        self._changed(ChangeKind.REDO)
        return EditResult(self.items)

    def _restore(self, snapshot: Snapshot) -> None:
        self._store.restore(snapshot)
        self._selection.retain(self._store.ids())

    # ========== Persistence ==========

    def hydrate(self) -> EditResult:
        """
        Load the stored document as a fresh baseline.

        Missing storage leaves the collection empty. Corrupt storage keeps the
        current (last known good) collection and returns CorruptStorageError.
        """
        if self._persistence is None:
            return EditResult(self.items)
        document, error = self._persistence.load()
        if error is not None:
            return EditResult(self.items, error=error)
        if document is None:
            return EditResult(self.items)
        self._replace_all(document.items)
        self._notify(ChangeKind.LOAD)
        return EditResult(self.items, value=document.saved_at)

    @_guarded
    def import_document(self, document: DocumentSource) -> EditResult:
        """
        Replace the collection with an imported document.

        History is reset (the import is a new baseline, not an undoable step).
        InvalidDocumentError leaves everything untouched.
        """
        if self._persistence is not None:
            items = self._persistence.import_document(document)
        else:
            items = list(parse_document(document).items)
        return self._accept_import(items)

    @_guarded
    def import_from_file(self, path: Union[str, Path]) -> EditResult:
        if self._persistence is not None:
            items = self._persistence.import_from_file(path)
        else:
            items = list(read_document_file(path).items)
        return self._accept_import(items)

    def _accept_import(self, items: List[Item]) -> EditResult:
        self._replace_all(items)
        self._changed(ChangeKind.IMPORT)
        logger.info(f"Imported {len(items)} item(s)")
        return EditResult(self.items, value=len(items))

    def _replace_all(self, items: Iterable[Item]) -> None:
        if self._persistence is not None:
            # Pending writes hold the replaced state
            self._persistence.cancel()
        self._reorder.cancel()
        self._edit_baseline = None
        self._restore(tuple(items))
        self._history.reset()

    def export_document(self) -> EditResult:
        """Item data plus save timestamp; selection and history are never exported."""
        self._commit_edits()
        if self._persistence is not None:
            document = self._persistence.export_document(self.items)
        else:
            document = PersistedDocument.from_items(self._store.snapshot())
        return EditResult(self.items, value=document)

    @_guarded
    def export_to_file(self, path: Union[str, Path]) -> EditResult:
        self._commit_edits()
        if self._persistence is not None:
            written = self._persistence.export_to_file(self.items, path)
        else:
            written = write_document_file(PersistedDocument.from_items(self._store.snapshot()), path)
        return EditResult(self.items, value=written)

    @_guarded
    def save(self) -> EditResult:
        """Explicit save: commit live edits and write the current state immediately."""
        self._settle()
        if self._persistence is None:
            return EditResult(self.items, value=False)
        self._persistence.schedule_save(self._store.all())
        return EditResult(self.items, value=self._persistence.flush())

    @_guarded
    def flush(self) -> EditResult:
        """Write any pending save now (e.g. before navigating away)."""
        self._commit_edits()
        if self._persistence is None:
            return EditResult(self.items, value=False)
        return EditResult(self.items, value=self._persistence.flush())


def create_kernel(name: Optional[str] = None,
                  project_id: Optional[str] = None,
                  medium: Optional[KeyValueStore] = None,
                  scheduler: Optional[TimerScheduler] = None) -> CollectionEditorKernel:
    """
    Build a kernel with persistence wired from EditorConfig.

    The storage key is ``key_prefix`` (plus ``-name``), namespaced per project.
    Without an explicit medium, ``storage_dir`` selects a JsonFileStore and an
    unset ``storage_dir`` falls back to an in-memory store.

    Args:
        name: Collection name within the project (e.g. "chapters")
        project_id: Project namespace; None or "default" uses the bare key
        medium: Durable backend overriding the configured one
        scheduler: Debounce timer queue (default: Qt event loop)

    Returns:
        Kernel bound to its storage key (not yet hydrated)
    """
    config = get_editor_config()
    base_key = f"{config.key_prefix}-{name}" if name else config.key_prefix
    key = project_key(base_key, project_id)

    if medium is None:
        medium = JsonFileStore(config.storage_dir) if config.storage_dir else MemoryStore()

    adapter = PersistenceAdapter(medium, key, debounce_ms=config.debounce_ms, scheduler=scheduler)
    logger.debug(f"Created kernel for storage key {key!r}")
    return CollectionEditorKernel(adapter, history_depth=config.history_depth)
