"""
Qt widgets bound to the collection editor kernel.
"""

from .collection_list_widget import CollectionManagerWidget

__all__ = [
    "CollectionManagerWidget",
]
