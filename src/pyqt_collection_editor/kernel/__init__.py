"""
Collection editor kernel: the single API surface for presentation code.
"""

from .collection_kernel import CollectionEditorKernel, create_kernel

__all__ = [
    "CollectionEditorKernel",
    "create_kernel",
]
