"""Tests for the JSON metadata document repository."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from manuscripts.dto.upload import UploadedFile
from manuscripts.exceptions.errors import PersistenceError, StorageError
from manuscripts.logic import version_engine as engine
from manuscripts.repository.json_project_repository import JsonProjectRepository
from manuscripts.repository.repo_config import RepoConfig


def _project(project_id: str = "p1"):
    return engine.create_project(
        "Novel",
        "Once upon a time",
        UploadedFile(original_name="novel.txt", size=16),
        project_id=project_id,
        version_id=f"{project_id}-v1",
        timestamp=1_700_000_000_000,
    )


def test_missing_document_loads_as_none(repo_config: RepoConfig) -> None:
    assert JsonProjectRepository(repo_config).load() is None


def test_persist_then_load(repo_config: RepoConfig) -> None:
    repo = JsonProjectRepository(repo_config)
    projects = [_project("p1"), _project("p2")]
    repo.persist(projects)

    assert repo.path == Path(repo_config.root_path) / "data.json"
    assert repo.load() == projects
    raw = json.loads(repo.path.read_text(encoding="utf-8"))
    assert [p["id"] for p in raw] == ["p1", "p2"]
    assert raw[0]["defaultBranchId"] == "branch-main"


def test_persist_leaves_no_temp_files(repo_config: RepoConfig) -> None:
    repo = JsonProjectRepository(repo_config)
    repo.persist([_project()])
    repo.persist([])
    assert sorted(p.name for p in repo.path.parent.iterdir()) == ["data.json"]
    assert repo.load() == []


def test_non_ascii_content_is_kept_readable(repo_config: RepoConfig) -> None:
    repo = JsonProjectRepository(repo_config)
    project = engine.create_project(
        "Roman", "Grüße aus München", UploadedFile(original_name="roman.txt", size=20)
    )
    repo.persist([project])
    assert "Grüße aus München" in repo.path.read_text(encoding="utf-8")


def test_legacy_document_is_migrated_on_load(repo_config: RepoConfig) -> None:
    path = repo_config.metadata_path
    path.parent.mkdir(parents=True)
    path.write_text(
        json.dumps(
            [
                {
                    "id": "legacy",
                    "name": "Legacy",
                    "type": "txt",
                    "lastModified": 5,
                    "versions": [],
                }
            ]
        ),
        encoding="utf-8",
    )
    (project,) = JsonProjectRepository(repo_config).load()
    assert project.default_branch.id == "branch-main"
    assert project.default_branch.created_at == 5


@pytest.mark.parametrize("payload", ["{not json", '{"id": "p1"}', '[{"name": "no id"}]'])
def test_corrupt_document_raises_storage_error(repo_config: RepoConfig, payload: str) -> None:
    path = repo_config.metadata_path
    path.parent.mkdir(parents=True)
    path.write_text(payload, encoding="utf-8")
    with pytest.raises(StorageError):
        JsonProjectRepository(repo_config).load()


def test_write_failure_raises_persistence_error(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file in the way", encoding="utf-8")
    repo = JsonProjectRepository(RepoConfig(root_path=str(blocker)))
    with pytest.raises(PersistenceError):
        repo.persist([_project()])
