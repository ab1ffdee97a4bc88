"""Storage: content-addressed blob store on the local filesystem.

Factory creates the store from drive.core.config. The store implements
IContentStore (scratch_file, write, open, remove, exists).
"""

from drive.infrastructure.external.storage.factory import StorageFactory
from drive.infrastructure.external.storage.local_storage import LocalContentStore

__all__ = [
    "LocalContentStore",
    "StorageFactory",
]
