"""IO exceptions."""

from pyqt_collection_editor.model.exceptions import CollectionEditorError


class CorruptStorageError(CollectionEditorError):
    """Stored content could not be parsed or does not have the document shape."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Corrupt storage under {key!r}: {reason}")
        self.key = key
        self.reason = reason


class InvalidDocumentError(CollectionEditorError):
    """An import document failed shape validation."""


class StorageWriteError(CollectionEditorError):
    """A write to the durable medium failed. Not retried automatically."""


class StorageQuotaExceeded(StorageWriteError):
    """The durable medium refused a write for lack of space."""
