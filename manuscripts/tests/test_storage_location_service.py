"""Tests for relocating the data directory."""
from __future__ import annotations

from pathlib import Path

import pytest

from core.config.config_service import ConfigService
from manuscripts.exceptions.errors import StorageMigrationError
from manuscripts.repository.json_project_repository import JsonProjectRepository
from manuscripts.services.storage_location_service import StorageLocationService


@pytest.fixture
def config(tmp_path: Path) -> ConfigService:
    return ConfigService(
        defaults_ini=tmp_path / "no-defaults.ini",
        user_config=tmp_path / "user" / "config.ini",
        environ={},
    )


@pytest.fixture
def service(session, repo_config, config) -> StorageLocationService:
    return StorageLocationService(session=session, config_service=config, repo_config=repo_config)


@pytest.fixture
def populated(session, write_file):
    project = session.create_project("Novel", write_file("novel.txt", "first draft"))
    session.upload_version(write_file("v2.txt", "first draft, revised"))
    return session.get_project(project.id)


def test_relocate_moves_files_and_rewrites_paths(service, session, populated, repo_config, config, tmp_path) -> None:
    old_paths = [Path(v.stored_path) for v in populated.default_branch.versions]
    target = service.relocate(tmp_path / "moved")

    new_files = target / "files"
    for version in session.get_project(populated.id).default_branch.versions:
        assert Path(version.stored_path).parent == new_files
        assert Path(version.stored_path).is_file()
    assert not any(p.exists() for p in old_paths)
    assert not repo_config.metadata_path.exists()

    persisted = JsonProjectRepository(service.repo_config).load()
    assert persisted == list(session.projects)
    assert config.storage.data_dir == target
    assert config.meta_source("Storage", "data_dir")["layer"] == "user"


def test_session_writes_to_new_location_after_relocation(service, session, populated, write_file, tmp_path) -> None:
    target = service.relocate(tmp_path / "moved")
    version = session.upload_version(write_file("v3.txt", "first draft, revised again"))
    assert Path(version.stored_path).parent == target / "files"
    assert len(JsonProjectRepository(service.repo_config).load()[0].default_branch.versions) == 3


def test_relocate_to_same_location_is_noop(service, populated, repo_config, config) -> None:
    service.relocate(repo_config.root_path)
    assert repo_config.metadata_path.exists()
    assert config.meta_source("Storage", "data_dir")["layer"] == "code"


def test_refuses_existing_data_directory(service, populated, tmp_path) -> None:
    occupied = tmp_path / "occupied"
    occupied.mkdir()
    (occupied / "data.json").write_text("[]", encoding="utf-8")
    with pytest.raises(StorageMigrationError):
        service.relocate(occupied)
    assert (occupied / "data.json").read_text(encoding="utf-8") == "[]"


def test_failure_rolls_back_partial_copy(service, session, populated, repo_config, config, tmp_path, monkeypatch) -> None:
    def _fail(*_args, **_kwargs):
        raise OSError("read-only config")

    monkeypatch.setattr(config, "set_user_value", _fail)
    target = tmp_path / "moved"
    before = session.projects

    with pytest.raises(StorageMigrationError):
        service.relocate(target)

    assert not target.exists()
    assert session.projects is before
    assert service.repo_config == repo_config
    assert repo_config.metadata_path.exists()
    for version in populated.default_branch.versions:
        assert Path(version.stored_path).is_file()


def test_reset_to_default(service, session, populated, config, tmp_path) -> None:
    service.relocate(tmp_path / "moved")
    default_root = tmp_path / "default-home"
    service.reset_to_default(default_root)
    assert config.storage.data_dir == default_root.resolve()
    for version in session.get_project(populated.id).default_branch.versions:
        assert Path(version.stored_path).parent == default_root.resolve() / "files"


def test_reset_to_builtin_default_drops_override(service, session, populated, config, tmp_path, monkeypatch) -> None:
    builtin = tmp_path / "builtin-home"
    monkeypatch.setattr("manuscripts.services.storage_location_service.default_data_dir", lambda: builtin)
    service.relocate(tmp_path / "moved")
    assert config.meta_source("Storage", "data_dir")["layer"] == "user"

    target = service.reset_to_default()

    assert target == builtin.resolve()
    assert config.meta_source("Storage", "data_dir")["layer"] == "code"
    for version in session.get_project(populated.id).default_branch.versions:
        assert Path(version.stored_path).parent == builtin.resolve() / "files"
