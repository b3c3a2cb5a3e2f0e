"""Filesystem implementation of StorageAdapter.

Stores raw uploads flat in one directory as ``<versionId>_<originalName>``.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
import subprocess
from pathlib import Path
from typing import Optional

from manuscripts.adapters.storage_adapter import StorageAdapter
from manuscripts.exceptions.errors import StorageError

logger = logging.getLogger(__name__)


class FilesystemStorageAdapter(StorageAdapter):
    """Local filesystem implementation of StorageAdapter."""

    def __init__(self, files_path: str | Path):
        """
        Args:
            files_path: Directory for raw file storage (created if missing)
        """
        self._root = Path(files_path)
        self._root.mkdir(parents=True, exist_ok=True)

    def store_raw_file(self, *, source_path: str, version_id: str, original_name: str) -> Optional[str]:
        """Copy the upload; failures are logged and reported as None."""
        dest_path = self._root / f"{version_id}_{Path(original_name).name}"
        try:
            shutil.copy2(source_path, dest_path)
        except OSError as ex:
            logger.error(f"Failed to store raw file {source_path} for version {version_id}: {ex}")
            return None
        return str(dest_path)

    def delete_raw_file(self, location: str) -> bool:
        try:
            Path(location).unlink()
        except FileNotFoundError:
            logger.warning(f"Raw file already missing: {location}")
            return False
        except OSError as ex:
            logger.error(f"Failed to delete raw file {location}: {ex}")
            return False
        return True

    def file_exists(self, location: str) -> bool:
        return Path(location).is_file()

    def open_externally(self, location: str) -> None:
        if not self.file_exists(location):
            raise StorageError(f"Stored file not found: {location}")
        system = platform.system()
        try:
            if system == "Windows":
                os.startfile(location)  # type: ignore[attr-defined]
            elif system == "Darwin":
                subprocess.run(["open", location], check=True)
            else:
                subprocess.run(["xdg-open", location], check=True)
        except (OSError, subprocess.CalledProcessError) as ex:
            raise StorageError(f"Cannot open {location}: {ex}") from ex

    def get_files_directory(self) -> str:
        return str(self._root)
