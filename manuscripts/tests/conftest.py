"""Shared fixtures for the manuscripts tests."""
from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional, Sequence

import pytest

from manuscripts.adapters.filesystem_storage_adapter import FilesystemStorageAdapter
from manuscripts.exceptions.errors import PersistenceError
from manuscripts.models.project import Project
from manuscripts.repository.json_project_repository import JsonProjectRepository
from manuscripts.repository.repo_config import RepoConfig
from manuscripts.services.project_session import ProjectSession


class FlakyRepository:
    """In-memory repository whose writes can be switched to fail."""

    def __init__(self) -> None:
        self.saved: Optional[List[Project]] = None
        self.fail = False
        self.writes = 0

    def load(self) -> Optional[List[Project]]:
        return None if self.saved is None else list(self.saved)

    def persist(self, projects: Sequence[Project]) -> None:
        if self.fail:
            raise PersistenceError("disk full")
        self.writes += 1
        self.saved = list(projects)


class Clock:
    """Deterministic epoch-millisecond clock."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        self.now += 1_000
        return self.now


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    uploads = tmp_path / "uploads"
    uploads.mkdir()

    def _write(name: str, content: str) -> Path:
        path = uploads / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def flaky_repository() -> FlakyRepository:
    return FlakyRepository()


@pytest.fixture
def repo_config(tmp_path: Path) -> RepoConfig:
    return RepoConfig(root_path=str(tmp_path / "data"))


@pytest.fixture
def session(repo_config: RepoConfig, clock: Clock) -> ProjectSession:
    return ProjectSession(
        repository=JsonProjectRepository(repo_config),
        storage=FilesystemStorageAdapter(repo_config.files_path),
        clock=clock,
    )
