"""Adapters for external dependencies.

Provides abstraction layers for raw file storage (filesystem/cloud-agnostic).
"""

from manuscripts.adapters.storage_adapter import StorageAdapter
from manuscripts.adapters.filesystem_storage_adapter import FilesystemStorageAdapter

__all__ = [
    "StorageAdapter",
    "FilesystemStorageAdapter",
]
