"""Result and notification types returned across the kernel boundary."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from pyqt_collection_editor.model.exceptions import CollectionEditorError
from pyqt_collection_editor.model.items import Item


class ChangeKind(Enum):
    """What kind of committed mutation produced a change notification."""
    ADD = "add"
    REMOVE = "remove"
    UPDATE = "update"
    REORDER = "reorder"
    UNDO = "undo"
    REDO = "redo"
    IMPORT = "import"
    LOAD = "load"


@dataclass(frozen=True)
class ChangeEvent:
    """Payload delivered to kernel subscribers after a committed mutation."""
    kind: ChangeKind
    items: Tuple[Item, ...]


@dataclass(frozen=True)
class EditResult:
    """
    Discriminated outcome of a kernel operation.

    Attributes:
        items: Item view after the operation (unchanged on failure)
        error: Typed error when the operation failed or was a no-op
        value: Operation-specific payload (new item id, exported document, ...)
    """
    items: Tuple[Item, ...]
    error: Optional[CollectionEditorError] = None
    value: Any = None

    @property
    def ok(self) -> bool:
        """True unless a real failure occurred (informational notices count as ok)."""
        return self.error is None or self.error.informational

    @property
    def notice(self) -> Optional[CollectionEditorError]:
        """Informational error such as NothingToUndo, if any."""
        return self.error if self.error is not None and self.error.informational else None
