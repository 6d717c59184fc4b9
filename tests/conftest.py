"""pytest configuration and fixtures for pyqt-collection-editor tests."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication

from pyqt_collection_editor.io.stores import MemoryStore
from pyqt_collection_editor.kernel import CollectionEditorKernel
from pyqt_collection_editor.protocols import set_editor_config
from pyqt_collection_editor.services.persistence_adapter import PersistenceAdapter

SAVED_AT = "2024-01-01T00:00:00+00:00"


class ManualScheduler:
    """Deterministic timer queue: callbacks run only when ``advance`` passes their due time."""

    def __init__(self):
        self.now = 0
        self._pending = {}
        self._next_handle = 0

    def schedule(self, delay_ms, callback):
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = (self.now + delay_ms, callback)
        return handle

    def cancel(self, handle):
        self._pending.pop(handle, None)

    @property
    def pending(self):
        return len(self._pending)

    def advance(self, ms):
        self.now += ms
        due = sorted(
            (due_at, handle) for handle, (due_at, _) in self._pending.items() if due_at <= self.now
        )
        for _, handle in due:
            entry = self._pending.pop(handle, None)
            if entry is not None:
                entry[1]()


class RecordingStore(MemoryStore):
    """MemoryStore that remembers every successful write."""

    def __init__(self, quota_bytes=None):
        super().__init__(quota_bytes)
        self.writes = []

    def set(self, key, value):
        super().set(key, value)
        self.writes.append((key, value))


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def reset_editor_config():
    set_editor_config(None)
    yield
    set_editor_config(None)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def medium():
    return RecordingStore()


@pytest.fixture
def adapter(medium, scheduler):
    return PersistenceAdapter(medium, "chapters", debounce_ms=500, scheduler=scheduler,
                              clock=lambda: SAVED_AT)


@pytest.fixture
def kernel(adapter):
    return CollectionEditorKernel(adapter)


@pytest.fixture
def abc_kernel(kernel):
    """Kernel holding A, B, C (ids "1", "2", "3") with empty history."""
    result = kernel.import_document({
        "items": [
            {"id": "1", "title": "A"},
            {"id": "2", "title": "B"},
            {"id": "3", "title": "C"},
        ],
    })
    assert result.ok
    return kernel
