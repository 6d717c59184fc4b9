"""
Persistence IO: the stored-document codec and durable key-value media.
"""

from .base import KeyValueStore, project_key
from .document import PersistedDocument, parse_document, read_document_file, write_document_file
from .exceptions import CorruptStorageError, InvalidDocumentError, StorageWriteError, StorageQuotaExceeded
from .stores import MemoryStore, JsonFileStore, QSettingsStore

__all__ = [
    "KeyValueStore",
    "project_key",
    "PersistedDocument",
    "parse_document",
    "read_document_file",
    "write_document_file",
    "CorruptStorageError",
    "InvalidDocumentError",
    "StorageWriteError",
    "StorageQuotaExceeded",
    "MemoryStore",
    "JsonFileStore",
    "QSettingsStore",
]
