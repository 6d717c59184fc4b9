"""
PersistedDocument codec.

Wire shape (JSON)::

    {
      "items": [
        {"id": "...", "order": 0, "title": "...", "body": ...,
         "createdAt": "...", "updatedAt": "...", "metadata": {...}}
      ],
      "savedAt": "2024-01-01T00:00:00+00:00"
    }

Array position is authoritative for order; ``order`` is written for readers
of the export file and ignored on the way in.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pyqt_collection_editor.io.exceptions import InvalidDocumentError, StorageWriteError
from pyqt_collection_editor.model.items import Item, utc_now


@dataclass(frozen=True)
class PersistedDocument:
    """On-disk / export shape of a collection. Never carries selection or history."""
    items: Tuple[Item, ...]
    saved_at: str

    @classmethod
    def from_items(cls, items: Iterable[Item], saved_at: Optional[str] = None) -> "PersistedDocument":
        return cls(items=tuple(items), saved_at=saved_at or utc_now())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item_to_dict(item, order) for order, item in enumerate(self.items)],
            "savedAt": self.saved_at,
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def item_to_dict(item: Item, order: int) -> Dict[str, Any]:
    return {
        "id": item.id,
        "order": order,
        "title": item.title,
        "body": item.body,
        "createdAt": item.created_at,
        "updatedAt": item.updated_at,
        "metadata": item.metadata,
    }


def item_from_dict(data: Any, position: int) -> Item:
    """Validate and convert one wire item; raises InvalidDocumentError."""
    if not isinstance(data, Mapping):
        raise InvalidDocumentError(f"items[{position}] is not an object")

    item_id = data.get("id")
    if not isinstance(item_id, str) or not item_id.strip():
        raise InvalidDocumentError(f"items[{position}] has no id")

    title = data.get("title")
    if not isinstance(title, str) or not title.strip():
        raise InvalidDocumentError(f"items[{position}] ({item_id!r}) has no title")

    metadata = data.get("metadata", {})
    if metadata is None:
        metadata = {}
    if not isinstance(metadata, Mapping):
        raise InvalidDocumentError(f"items[{position}] ({item_id!r}) metadata is not an object")

    now = utc_now()
    return Item(
        id=item_id,
        title=title,
        body=data.get("body"),
        created_at=str(data.get("createdAt") or now),
        updated_at=str(data.get("updatedAt") or now),
        metadata=dict(metadata),
    )


def document_from_dict(data: Any) -> PersistedDocument:
    """
    Validate a decoded document.

    Raises:
        InvalidDocumentError: ``items`` missing or not a list, an item without a
            non-empty id or title, or the same id appearing twice
    """
    if not isinstance(data, Mapping):
        raise InvalidDocumentError("Document is not an object")

    raw_items = data.get("items")
    if not isinstance(raw_items, list):
        raise InvalidDocumentError("Document 'items' is not a list")

    items: List[Item] = []
    seen = set()
    for position, raw in enumerate(raw_items):
        item = item_from_dict(raw, position)
        if item.id in seen:
            raise InvalidDocumentError(f"Duplicate item id {item.id!r}")
        seen.add(item.id)
        items.append(item)

    saved_at = data.get("savedAt")
    return PersistedDocument(items=tuple(items), saved_at=str(saved_at) if saved_at else utc_now())


def parse_document(source: Union[str, bytes, Mapping, PersistedDocument]) -> PersistedDocument:
    """Accept JSON text, a decoded mapping, or an existing document."""
    if isinstance(source, PersistedDocument):
        return document_from_dict(source.to_dict())
    if isinstance(source, (str, bytes)):
        try:
            source = json.loads(source)
        except ValueError as e:
            raise InvalidDocumentError(f"Document is not valid JSON: {e}") from e
    return document_from_dict(source)


def read_document_file(path: Union[str, Path]) -> PersistedDocument:
    """Read and validate an import file chosen by the user."""
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidDocumentError(f"Could not read import file {path}: {e}") from e
    return parse_document(raw)


def write_document_file(document: PersistedDocument, path: Union[str, Path]) -> Path:
    """Write an export file in the stored-document shape."""
    path = Path(path)
    try:
        payload = document.to_json(indent=2)
    except (TypeError, ValueError) as e:
        raise StorageWriteError(f"Export to {path} is not serializable: {e}") from e
    try:
        path.write_text(payload, encoding="utf-8")
    except OSError as e:
        raise StorageWriteError(f"Could not write export file {path}: {e}") from e
    return path
