"""
Mapping between domain models and the persisted JSON shape.

The persisted document keeps the camelCase keys of the metadata file
(``originalName``, ``similarityToPrevious``, ``defaultBranchId``, ...).
Legacy records are normalized by :mod:`manuscripts.logic.migration` here,
at the boundary, so models only ever carry the current shape.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from manuscripts.enum.change_type import ChangeType
from manuscripts.enum.project_type import ProjectType
from manuscripts.logic.migration import migrate_project_dict
from manuscripts.models.branch import Branch
from manuscripts.models.project import Project
from manuscripts.models.version import ManuscriptVersion, VersionMetadata


def _opt_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def _int(value: Any, default: int = 0) -> int:
    return default if value is None else int(value)


# -------------------------------------------------------------------------
# dict -> model
# -------------------------------------------------------------------------
def version_from_dict(raw: Mapping[str, Any]) -> ManuscriptVersion:
    meta = raw.get("metadata") or {}
    metadata = VersionMetadata(
        original_name=str(meta.get("originalName", "")),
        timestamp=_int(meta.get("timestamp")),
        version_label=str(meta.get("versionLabel", "")),
        hash=str(meta.get("hash", "")),
        size=_int(meta.get("size")),
        stored_path=meta.get("storedPath") or None,
    )
    return ManuscriptVersion(
        id=str(raw["id"]),
        content=str(raw.get("content", "")),
        metadata=metadata,
        similarity_to_previous=_opt_float(raw.get("similarityToPrevious")),
        change_type=ChangeType(raw.get("changeType", ChangeType.INITIAL.value)),
        ai_analysis=raw.get("aiAnalysis"),
    )


def branch_from_dict(raw: Mapping[str, Any]) -> Branch:
    return Branch(
        id=str(raw["id"]),
        name=str(raw.get("name", "")),
        versions=tuple(version_from_dict(v) for v in raw.get("versions") or []),
        created_at=_int(raw.get("createdAt")),
    )


def project_from_dict(raw: Mapping[str, Any]) -> Project:
    """Build a project from a persisted record, migrating legacy records first."""
    data = migrate_project_dict(raw)
    branches = tuple(branch_from_dict(b) for b in data["branches"])
    try:
        project_type = ProjectType(data.get("type", ProjectType.TXT.value))
    except ValueError:
        project_type = ProjectType.TXT
    return Project(
        id=str(data["id"]),
        name=str(data.get("name", "")),
        type=project_type,
        branches=branches,
        default_branch_id=str(data.get("defaultBranchId") or branches[0].id),
        last_modified=_int(data.get("lastModified")),
    )


# -------------------------------------------------------------------------
# model -> dict
# -------------------------------------------------------------------------
def version_to_dict(version: ManuscriptVersion) -> Dict[str, Any]:
    meta = version.metadata
    metadata: Dict[str, Any] = {
        "originalName": meta.original_name,
        "timestamp": meta.timestamp,
        "versionLabel": meta.version_label,
        "hash": meta.hash,
        "size": meta.size,
    }
    if meta.stored_path:
        metadata["storedPath"] = meta.stored_path
    data: Dict[str, Any] = {
        "id": version.id,
        "content": version.content,
        "metadata": metadata,
        "similarityToPrevious": version.similarity_to_previous,
        "changeType": version.change_type.value,
    }
    if version.ai_analysis is not None:
        data["aiAnalysis"] = version.ai_analysis
    return data


def branch_to_dict(branch: Branch) -> Dict[str, Any]:
    return {
        "id": branch.id,
        "name": branch.name,
        "versions": [version_to_dict(v) for v in branch.versions],
        "createdAt": branch.created_at,
    }


def project_to_dict(project: Project) -> Dict[str, Any]:
    return {
        "id": project.id,
        "name": project.name,
        "type": project.type.value,
        "branches": [branch_to_dict(b) for b in project.branches],
        "defaultBranchId": project.default_branch_id,
        "lastModified": project.last_modified,
    }


def projects_to_list(projects: List[Project]) -> List[Dict[str, Any]]:
    return [project_to_dict(p) for p in projects]
