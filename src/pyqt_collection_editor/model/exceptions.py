"""Collection editor exceptions."""


class CollectionEditorError(Exception):
    """Base class for every error the kernel converts into a result.

    Subclasses flagged ``informational`` describe a no-op (e.g. nothing to undo)
    rather than a failure.
    """

    informational = False


class DuplicateIdError(CollectionEditorError):
    """Raised when an item is added with an id already in the collection."""

    def __init__(self, item_id: str):
        super().__init__(f"Item id already exists: {item_id!r}")
        self.item_id = item_id


class NotFoundError(CollectionEditorError):
    """Raised when one or more ids are not in the collection."""

    def __init__(self, missing):
        missing = tuple(missing) if not isinstance(missing, str) else (missing,)
        super().__init__(f"Unknown item id(s): {', '.join(map(repr, missing))}")
        self.missing = missing


class IndexOutOfRangeError(CollectionEditorError):
    """Raised for positions outside the current collection bounds."""

    def __init__(self, index, size: int):
        super().__init__(f"Index {index!r} out of range for collection of {size} item(s)")
        self.index = index
        self.size = size


class InvalidPatchError(CollectionEditorError):
    """Raised when an update patch touches a field the caller may not change."""


class NothingToUndo(CollectionEditorError):
    """Undo requested with an empty past stack."""

    informational = True

    def __init__(self):
        super().__init__("Nothing to undo")


class NothingToRedo(CollectionEditorError):
    """Redo requested with an empty future stack."""

    informational = True

    def __init__(self):
        super().__init__("Nothing to redo")
