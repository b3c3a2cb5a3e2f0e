"""
Version engine: pure state transitions over projects, branches and versions.

Every operation takes the current immutable state and returns the next one;
nothing here touches the filesystem, the UI or the persisted document.

Invariants kept by this module:
- versions within a branch are ordered newest-first (index 0 is the head);
- the oldest version of a branch is always ``Initial`` / ``None`` / ``V1.0.0``;
- similarity, change type and label of every other version are derived from
  its immediate predecessor in the same branch.
"""
from __future__ import annotations

import uuid
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from core.helpers.date_time_helper import now_millis
from manuscripts.enum.change_type import ChangeType
from manuscripts.enum.project_type import ProjectType
from manuscripts.dto.upload import UploadedFile
from manuscripts.exceptions.errors import (
    BranchNotFoundError,
    InputError,
    ProjectNotFoundError,
    VersionNotFoundError,
)
from manuscripts.logic.classification import (
    DEFAULT_THRESHOLDS,
    INITIAL_LABEL,
    ClassifierThresholds,
    classify,
    next_version_label,
)
from manuscripts.logic.hashing import content_hash
from manuscripts.logic.similarity import similarity
from manuscripts.models.branch import Branch
from manuscripts.models.project import MAIN_BRANCH_ID, MAIN_BRANCH_NAME, Project
from manuscripts.models.version import ManuscriptVersion, VersionMetadata


def new_version_id() -> str:
    return str(uuid.uuid4())


def new_project_id() -> str:
    return str(uuid.uuid4())


def new_branch_id() -> str:
    return f"branch-{uuid.uuid4().hex}"


# =========================================================================
# Lookups
# =========================================================================

def find_project(projects: Sequence[Project], project_id: str) -> Project:
    for project in projects:
        if project.id == project_id:
            return project
    raise ProjectNotFoundError(f"Unknown project: {project_id!r}")


def require_branch(project: Project, branch_id: str) -> Branch:
    branch = project.get_branch(branch_id)
    if branch is None:
        raise BranchNotFoundError(f"Project {project.id!r} has no branch {branch_id!r}")
    return branch


def replace_project(projects: Sequence[Project], project: Project) -> Tuple[Project, ...]:
    return tuple(project if p.id == project.id else p for p in projects)


# =========================================================================
# Version construction
# =========================================================================

def build_version(
    content: str,
    upload: UploadedFile,
    *,
    previous: Optional[ManuscriptVersion],
    thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS,
    version_id: Optional[str] = None,
    timestamp: Optional[int] = None,
    stored_path: Optional[str] = None,
) -> ManuscriptVersion:
    """Create a version for *content* relative to *previous* (None for the first)."""
    if previous is None:
        score: Optional[float] = None
        change_type = ChangeType.INITIAL
        label = INITIAL_LABEL
    else:
        score = similarity(content, previous.content)
        change_type = classify(score, False, thresholds)
        label = next_version_label(previous.version_label, change_type)

    metadata = VersionMetadata(
        original_name=upload.original_name,
        timestamp=now_millis() if timestamp is None else timestamp,
        version_label=label,
        hash=content_hash(content),
        size=upload.size,
        stored_path=stored_path,
    )
    return ManuscriptVersion(
        id=version_id or new_version_id(),
        content=content,
        metadata=metadata,
        similarity_to_previous=score,
        change_type=change_type,
    )


def recompute_chain(
    versions: Sequence[ManuscriptVersion],
    thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS,
) -> Tuple[ManuscriptVersion, ...]:
    """Re-derive similarity, change type and label for a newest-first list.

    Walks oldest to newest; each label is derived from the freshly computed
    label of its new predecessor.
    """
    rebuilt: List[ManuscriptVersion] = []
    previous: Optional[ManuscriptVersion] = None
    for version in reversed(versions):
        if previous is None:
            current = version.with_derived(
                similarity_to_previous=None,
                change_type=ChangeType.INITIAL,
                version_label=INITIAL_LABEL,
            )
        else:
            score = similarity(version.content, previous.content)
            change_type = classify(score, False, thresholds)
            current = version.with_derived(
                similarity_to_previous=score,
                change_type=change_type,
                version_label=next_version_label(previous.version_label, change_type),
            )
        rebuilt.append(current)
        previous = current
    rebuilt.reverse()
    return tuple(rebuilt)


# =========================================================================
# Operations
# =========================================================================

def create_project(
    name: str,
    content: str,
    upload: UploadedFile,
    *,
    project_id: Optional[str] = None,
    version_id: Optional[str] = None,
    timestamp: Optional[int] = None,
    stored_path: Optional[str] = None,
) -> Project:
    """Create a project whose ``main`` branch holds the initial version."""
    clean_name = (name or "").strip()
    if not clean_name:
        raise InputError("Project name is required")

    ts = now_millis() if timestamp is None else timestamp
    version = build_version(
        content,
        upload,
        previous=None,
        version_id=version_id,
        timestamp=ts,
        stored_path=stored_path,
    )
    main = Branch(id=MAIN_BRANCH_ID, name=MAIN_BRANCH_NAME, versions=(version,), created_at=ts)
    return Project(
        id=project_id or new_project_id(),
        name=clean_name,
        type=ProjectType.from_filename(upload.original_name),
        branches=(main,),
        default_branch_id=MAIN_BRANCH_ID,
        last_modified=ts,
    )


def append_version(
    project: Project,
    branch_id: str,
    content: str,
    upload: UploadedFile,
    *,
    thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS,
    version_id: Optional[str] = None,
    timestamp: Optional[int] = None,
    stored_path: Optional[str] = None,
) -> Tuple[Project, ManuscriptVersion]:
    """Prepend a new head version to *branch_id*."""
    branch = require_branch(project, branch_id)
    ts = now_millis() if timestamp is None else timestamp
    version = build_version(
        content,
        upload,
        previous=branch.head,
        thresholds=thresholds,
        version_id=version_id,
        timestamp=ts,
        stored_path=stored_path,
    )
    updated = branch.with_versions((version,) + branch.versions)
    return project.replace_branch(updated, last_modified=ts), version


def delete_version(
    project: Project,
    branch_id: str,
    version_id: str,
    *,
    thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS,
    timestamp: Optional[int] = None,
) -> Tuple[Project, ManuscriptVersion]:
    """Remove a version and recompute the surviving chain."""
    branch = require_branch(project, branch_id)
    idx = branch.index_of(version_id)
    if idx < 0:
        raise VersionNotFoundError(f"Branch {branch_id!r} has no version {version_id!r}")

    removed = branch.versions[idx]
    survivors = branch.versions[:idx] + branch.versions[idx + 1:]
    updated = branch.with_versions(recompute_chain(survivors, thresholds))
    ts = now_millis() if timestamp is None else timestamp
    return project.replace_branch(updated, last_modified=ts), removed


def create_branch(
    project: Project,
    name: str,
    source_branch_id: str,
    *,
    branch_id: Optional[str] = None,
    created_at: Optional[int] = None,
) -> Tuple[Project, Branch]:
    """Fork *source_branch_id* into a new branch holding a copy of its versions."""
    clean_name = (name or "").strip()
    if not clean_name:
        raise InputError("Branch name is required")

    source = require_branch(project, source_branch_id)
    new_id = branch_id or new_branch_id()
    if project.get_branch(new_id) is not None:
        raise InputError(f"Branch id {new_id!r} already exists")

    ts = now_millis() if created_at is None else created_at
    branch = Branch(id=new_id, name=clean_name, versions=tuple(source.versions), created_at=ts)
    return project.add_branch(branch, last_modified=ts), branch


def remove_project(
    projects: Sequence[Project], project_id: str
) -> Tuple[Tuple[Project, ...], Project]:
    removed = find_project(projects, project_id)
    return tuple(p for p in projects if p.id != project_id), removed


# =========================================================================
# Stored-path bookkeeping
# =========================================================================

def stored_paths(projects: Iterable[Project]) -> set[str]:
    """All raw-file locations referenced anywhere in *projects*."""
    paths: set[str] = set()
    for project in projects:
        for branch in project.branches:
            for version in branch.versions:
                if version.stored_path:
                    paths.add(version.stored_path)
    return paths


def map_versions(
    projects: Iterable[Project],
    fn: Callable[[ManuscriptVersion], ManuscriptVersion],
) -> Tuple[Project, ...]:
    result: List[Project] = []
    for project in projects:
        for branch in project.branches:
            project = project.replace_branch(branch.with_versions(fn(v) for v in branch.versions))
        result.append(project)
    return tuple(result)


def rewrite_stored_paths(
    projects: Iterable[Project], old_dir: str | Path, new_dir: str | Path
) -> Tuple[Project, ...]:
    """Point every stored path inside *old_dir* at the same file name in *new_dir*."""
    old_root = Path(old_dir).resolve()
    new_root = Path(new_dir)

    def _move(version: ManuscriptVersion) -> ManuscriptVersion:
        if not version.stored_path:
            return version
        path = Path(version.stored_path)
        if path.resolve().parent != old_root:
            return version
        return version.with_stored_path(str(new_root / path.name))

    return map_versions(projects, _move)
