"""Tests for legacy migration and the persisted JSON shape."""
from __future__ import annotations

import copy

from manuscripts.enum.change_type import ChangeType
from manuscripts.enum.project_type import ProjectType
from manuscripts.logic.migration import is_legacy_project, migrate_project_dict, migrate_projects
from manuscripts.models.mappers import project_from_dict, project_to_dict
from manuscripts.models.project import MAIN_BRANCH_ID


def _legacy_record() -> dict:
    return {
        "id": "p1",
        "name": "Old Novel",
        "type": "md",
        "lastModified": 1_690_000_000_000,
        "versions": [
            {
                "id": "v2",
                "content": "second draft",
                "metadata": {
                    "originalName": "novel.md",
                    "timestamp": 1_690_000_000_000,
                    "versionLabel": "V1.0.1",
                    "hash": "abc",
                    "size": 12,
                    "storedPath": "/data/files/v2_novel.md",
                },
                "similarityToPrevious": 95.5,
                "changeType": "Tweak",
            },
            {
                "id": "v1",
                "content": "first draft",
                "metadata": {
                    "originalName": "novel.md",
                    "timestamp": 1_680_000_000_000,
                    "versionLabel": "V1.0.0",
                    "hash": "def",
                    "size": 11,
                },
                "similarityToPrevious": None,
                "changeType": "Initial",
            },
        ],
    }


def test_legacy_record_is_lifted_into_main_branch() -> None:
    raw = _legacy_record()
    migrated = migrate_project_dict(raw)

    assert "versions" not in migrated
    assert migrated["defaultBranchId"] == MAIN_BRANCH_ID
    (branch,) = migrated["branches"]
    assert branch["id"] == MAIN_BRANCH_ID
    assert branch["name"] == "main"
    assert branch["createdAt"] == raw["lastModified"]
    assert [v["id"] for v in branch["versions"]] == ["v2", "v1"]


def test_empty_branches_list_counts_as_legacy() -> None:
    raw = _legacy_record()
    raw["branches"] = []
    assert is_legacy_project(raw)
    assert len(migrate_project_dict(raw)["branches"]) == 1


def test_migration_is_idempotent_and_does_not_mutate_input() -> None:
    raw = _legacy_record()
    pristine = copy.deepcopy(raw)
    once = migrate_project_dict(raw)
    twice = migrate_project_dict(once)

    assert twice == once
    assert raw == pristine
    assert migrate_projects([once, raw]) == [once, once]


def test_project_from_legacy_dict() -> None:
    project = project_from_dict(_legacy_record())

    assert project.type is ProjectType.MD
    assert project.default_branch_id == MAIN_BRANCH_ID
    head, oldest = project.default_branch.versions
    assert head.change_type is ChangeType.TWEAK
    assert head.similarity_to_previous == 95.5
    assert head.stored_path == "/data/files/v2_novel.md"
    assert oldest.similarity_to_previous is None
    assert oldest.stored_path is None


def test_round_trip_keeps_camel_case_shape() -> None:
    project = project_from_dict(_legacy_record())
    data = project_to_dict(project)

    assert set(data) == {"id", "name", "type", "branches", "defaultBranchId", "lastModified"}
    version = data["branches"][0]["versions"][0]
    assert set(version) == {"id", "content", "metadata", "similarityToPrevious", "changeType"}
    assert version["metadata"]["originalName"] == "novel.md"
    assert "storedPath" not in data["branches"][0]["versions"][1]["metadata"]
    assert project_from_dict(data) == project


def test_unknown_type_and_missing_default_branch() -> None:
    raw = migrate_project_dict(_legacy_record())
    raw["type"] = "pdf"
    del raw["defaultBranchId"]
    project = project_from_dict(raw)
    assert project.type is ProjectType.TXT
    assert project.default_branch_id == MAIN_BRANCH_ID


def test_ai_analysis_survives_load_and_persist() -> None:
    raw = _legacy_record()
    raw["versions"][1]["aiAnalysis"] = "**Tone**: sombre"
    project = project_from_dict(raw)

    _, oldest = project.default_branch.versions
    assert oldest.ai_analysis == "**Tone**: sombre"

    data = project_to_dict(project)
    head_dict, oldest_dict = data["branches"][0]["versions"]
    assert oldest_dict["aiAnalysis"] == "**Tone**: sombre"
    assert "aiAnalysis" not in head_dict
    assert project_from_dict(data) == project
