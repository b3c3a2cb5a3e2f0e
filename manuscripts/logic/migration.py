"""
Schema migration for persisted projects.

Older metadata documents stored a flat ``versions`` list per project and no
``branches``. Such records are lifted into a single ``main`` branch with id
``branch-main`` before anything else sees them. Already migrated records
pass through unchanged, so migrating twice is a no-op.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from manuscripts.models.project import MAIN_BRANCH_ID, MAIN_BRANCH_NAME


def is_legacy_project(raw: Mapping[str, Any]) -> bool:
    """A record is legacy when it has no (or an empty) ``branches`` list."""
    return not raw.get("branches")


def migrate_project_dict(raw: Mapping[str, Any]) -> Dict[str, Any]:
    if not is_legacy_project(raw):
        return dict(raw)

    migrated = {key: value for key, value in raw.items() if key != "versions"}
    migrated["branches"] = [
        {
            "id": MAIN_BRANCH_ID,
            "name": MAIN_BRANCH_NAME,
            "versions": list(raw.get("versions") or []),
            "createdAt": raw.get("lastModified"),
        }
    ]
    migrated["defaultBranchId"] = MAIN_BRANCH_ID
    return migrated


def migrate_projects(raw_projects: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    return [migrate_project_dict(raw) for raw in raw_projects]
