"""JSON file implementation of ProjectRepository.

The whole project list is rewritten after every mutation. Writes go to a
temporary file in the same directory which then replaces the document, so a
failed write never leaves a truncated document behind.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence

from manuscripts.exceptions.errors import PersistenceError, StorageError
from manuscripts.models.mappers import project_from_dict, projects_to_list
from manuscripts.models.project import Project
from manuscripts.repository.repo_config import RepoConfig

logger = logging.getLogger(__name__)


class JsonProjectRepository:
    """Metadata document backend for projects."""

    def __init__(self, config: RepoConfig) -> None:
        """
        Args:
            config: Repository configuration
        """
        self._cfg = config

    @property
    def config(self) -> RepoConfig:
        return self._cfg

    @property
    def path(self) -> Path:
        return self._cfg.metadata_path

    def load(self) -> Optional[List[Project]]:
        if not self.path.exists():
            return None
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as ex:
            logger.error(f"Failed to read metadata document {self.path}: {ex}")
            raise StorageError(f"Cannot read metadata document {self.path}: {ex}") from ex

        if not isinstance(raw, list):
            raise StorageError(f"Metadata document {self.path} must contain a list of projects")
        try:
            return [project_from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError) as ex:
            raise StorageError(f"Malformed project record in {self.path}: {ex}") from ex

    def persist(self, projects: Sequence[Project]) -> None:
        payload = json.dumps(projects_to_list(list(projects)), indent=2, ensure_ascii=False)
        tmp_name: Optional[str] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as fh:
                tmp_name = fh.name
                fh.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as ex:
            if tmp_name:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            logger.error(f"Failed to persist metadata document {self.path}: {ex}")
            raise PersistenceError(f"Cannot write metadata document {self.path}: {ex}") from ex
