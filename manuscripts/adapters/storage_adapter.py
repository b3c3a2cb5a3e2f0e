"""Storage adapter abstraction.

Defines the interface for raw uploaded files. The version engine only ever
sees the returned location reference (``metadata.storedPath``).
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional


class StorageAdapter(ABC):
    """Abstract storage adapter for raw manuscript uploads."""

    @abstractmethod
    def store_raw_file(self, *, source_path: str, version_id: str, original_name: str) -> Optional[str]:
        """
        Copy an uploaded file into storage.

        Args:
            source_path: Path to the uploaded file
            version_id: Id of the version the file belongs to
            original_name: File name as uploaded

        Returns:
            Location reference, or None if the file could not be stored
        """
        raise NotImplementedError

    @abstractmethod
    def delete_raw_file(self, location: str) -> bool:
        """
        Delete a stored file.

        Args:
            location: Location reference returned by store_raw_file

        Returns:
            True if the file was deleted
        """
        raise NotImplementedError

    @abstractmethod
    def file_exists(self, location: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def open_externally(self, location: str) -> None:
        """
        Open a stored file with the operating system's default application.

        Raises:
            StorageError: file missing or no opener available
        """
        raise NotImplementedError

    @abstractmethod
    def get_files_directory(self) -> str:
        """Directory/prefix under which raw files are stored."""
        raise NotImplementedError
