"""
ProjectSession - owns the in-memory project list of one running application.

Every mutating call follows the same sequence:
validate → extract/store collaborators → pure engine transition → commit.
``_commit`` swaps in the new state, persists it and writes one event log
entry. A failure before the engine transition leaves the state untouched;
a failure while persisting keeps the new in-memory state and surfaces as
``PersistenceError`` (``save()`` retries). Raw files of records the new state
no longer references are removed in either case.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from core.helpers.date_time_helper import now_millis
from core.logging.logic.logger import EventLogger
from manuscripts.adapters.storage_adapter import StorageAdapter
from manuscripts.dto.upload import UploadedFile
from manuscripts.exceptions.errors import (
    InputError,
    ManuscriptsError,
    PersistenceError,
    StorageError,
    VersionNotFoundError,
)
from manuscripts.logic import version_engine as engine
from manuscripts.logic.classification import DEFAULT_THRESHOLDS, ClassifierThresholds
from manuscripts.logic.export_naming import export_file_name
from manuscripts.logic.text_export import write_text_export
from manuscripts.logic.text_extraction import TextExtractor, validate_upload
from manuscripts.models.branch import Branch
from manuscripts.models.project import Project
from manuscripts.models.version import ManuscriptVersion
from manuscripts.repository.project_repository import ProjectRepository

logger = logging.getLogger(__name__)

FEATURE = "manuscripts"


class ProjectSession:
    """Session state plus the mutating operations on it."""

    def __init__(
        self,
        *,
        repository: ProjectRepository,
        storage: StorageAdapter,
        extractor: Optional[TextExtractor] = None,
        thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS,
        event_log: Optional[EventLogger] = None,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        """
        Args:
            repository: Metadata document backend
            storage: Raw-file storage
            extractor: Text extractor (default: TextExtractor())
            thresholds: Change classification thresholds
            event_log: Optional persistent event log
            clock: Epoch-millisecond time source
        """
        self._repo = repository
        self._storage = storage
        self._extractor = extractor or TextExtractor()
        self._thresholds = thresholds
        self._events = event_log
        self._clock = clock

        self._projects: Tuple[Project, ...] = ()
        self._active_project_id: Optional[str] = None
        self._active_branch_id: Optional[str] = None

    # ------------------------------------------------------------------ #
    #  State access                                                      #
    # ------------------------------------------------------------------ #
    @property
    def projects(self) -> Tuple[Project, ...]:
        return self._projects

    @property
    def repository(self) -> ProjectRepository:
        return self._repo

    @property
    def storage(self) -> StorageAdapter:
        return self._storage

    @property
    def thresholds(self) -> ClassifierThresholds:
        return self._thresholds

    @property
    def event_log(self) -> Optional[EventLogger]:
        return self._events

    @property
    def active_project_id(self) -> Optional[str]:
        return self._active_project_id

    @property
    def active_branch_id(self) -> Optional[str]:
        return self._active_branch_id

    def get_project(self, project_id: str) -> Project:
        return engine.find_project(self._projects, project_id)

    def get_version(self, project_id: str, branch_id: str, version_id: str) -> ManuscriptVersion:
        branch = engine.require_branch(self.get_project(project_id), branch_id)
        version = branch.find_version(version_id)
        if version is None:
            raise VersionNotFoundError(f"Branch {branch_id!r} has no version {version_id!r}")
        return version

    def active_project(self) -> Optional[Project]:
        if self._active_project_id is None:
            return None
        for project in self._projects:
            if project.id == self._active_project_id:
                return project
        return None

    def active_branch(self) -> Optional[Branch]:
        project = self.active_project()
        if project is None:
            return None
        return project.resolve_branch(self._active_branch_id)

    # ------------------------------------------------------------------ #
    #  Load / save                                                       #
    # ------------------------------------------------------------------ #
    def load(self) -> Tuple[Project, ...]:
        """Read the metadata document; a missing document means no projects."""
        loaded = self._repo.load()
        self._projects = tuple(loaded or ())
        self._active_project_id = self._projects[0].id if self._projects else None
        self._active_branch_id = None
        logger.info(f"Loaded {len(self._projects)} project(s)")
        return self._projects

    def save(self) -> None:
        """Persist the current state; retries a previously failed write."""
        self._repo.persist(self._projects)

    def rebind(
        self,
        *,
        repository: ProjectRepository,
        storage: StorageAdapter,
        projects: Optional[Sequence[Project]] = None,
    ) -> None:
        """Switch collaborators, e.g. after the data directory moved."""
        self._repo = repository
        self._storage = storage
        if projects is not None:
            self._projects = tuple(projects)

    # ------------------------------------------------------------------ #
    #  Selection                                                         #
    # ------------------------------------------------------------------ #
    def select_project(self, project_id: str) -> Project:
        project = self.get_project(project_id)
        self._active_project_id = project.id
        self._active_branch_id = project.default_branch.id
        return project

    def select_branch(self, branch_id: str) -> Branch:
        project = self.active_project()
        if project is None:
            raise InputError("No project selected")
        branch = engine.require_branch(project, branch_id)
        self._active_branch_id = branch.id
        return branch

    # ------------------------------------------------------------------ #
    #  Projects                                                          #
    # ------------------------------------------------------------------ #
    def create_project(self, name: Optional[str], path: str | Path) -> Project:
        """
        Create a project from its first upload.

        Args:
            name: Project name; blank falls back to the file stem
            path: Upload to extract

        Returns:
            The new project (also made active)
        """
        source = validate_upload(path)
        clean_name = (name or "").strip() or source.stem
        content = self._extractor.extract(source)
        upload = UploadedFile.from_path(source)

        version_id = engine.new_version_id()
        stored_path = self._store(upload, version_id)
        try:
            project = engine.create_project(
                clean_name,
                content,
                upload,
                version_id=version_id,
                timestamp=self._clock(),
                stored_path=stored_path,
            )
        except ManuscriptsError:
            self._discard_stored(stored_path)
            raise

        self._active_project_id = project.id
        self._active_branch_id = project.default_branch_id
        self._commit(
            self._projects + (project,),
            event="project_created",
            reference_id=project.id,
            message=f"Project '{project.name}' created from {upload.original_name}",
        )
        return project

    def delete_project(self, project_id: str) -> Project:
        remaining, removed = engine.remove_project(self._projects, project_id)
        if self._active_project_id == project_id:
            self._active_project_id = remaining[0].id if remaining else None
            self._active_branch_id = None
        try:
            self._commit(
                remaining,
                event="project_deleted",
                reference_id=removed.id,
                message=f"Project '{removed.name}' deleted",
            )
        finally:
            # the in-memory state has advanced even if persisting failed
            self._cleanup(engine.stored_paths([removed]), reference_id=removed.id)
        return removed

    # ------------------------------------------------------------------ #
    #  Versions                                                          #
    # ------------------------------------------------------------------ #
    def upload_version(
        self,
        path: str | Path,
        *,
        project_id: Optional[str] = None,
        branch_id: Optional[str] = None,
    ) -> ManuscriptVersion:
        """
        Extract *path* and prepend it as the new head of the branch.

        Both ids default to the active selection.
        """
        project = self._target_project(project_id)
        branch = engine.require_branch(project, branch_id or project.resolve_branch(self._active_branch_id).id)

        source = validate_upload(path)
        content = self._extractor.extract(source)
        upload = UploadedFile.from_path(source)

        version_id = engine.new_version_id()
        stored_path = self._store(upload, version_id)
        try:
            updated, version = engine.append_version(
                project,
                branch.id,
                content,
                upload,
                thresholds=self._thresholds,
                version_id=version_id,
                timestamp=self._clock(),
                stored_path=stored_path,
            )
        except ManuscriptsError:
            self._discard_stored(stored_path)
            raise
        self._commit(
            engine.replace_project(self._projects, updated),
            event="version_appended",
            reference_id=version.id,
            message=(
                f"{version.version_label} ({version.change_type.value}) appended to "
                f"'{project.name}'/{branch.name}"
            ),
        )
        return version

    def delete_version(self, project_id: str, branch_id: str, version_id: str) -> ManuscriptVersion:
        project = self.get_project(project_id)
        updated, removed = engine.delete_version(
            project,
            branch_id,
            version_id,
            thresholds=self._thresholds,
            timestamp=self._clock(),
        )
        try:
            self._commit(
                engine.replace_project(self._projects, updated),
                event="version_deleted",
                reference_id=removed.id,
                message=f"{removed.version_label} removed from '{project.name}'/{branch_id}",
            )
        finally:
            if removed.stored_path:
                self._cleanup([removed.stored_path], reference_id=removed.id)
        return removed

    # ------------------------------------------------------------------ #
    #  Branches                                                          #
    # ------------------------------------------------------------------ #
    def create_branch(
        self,
        name: str,
        *,
        project_id: Optional[str] = None,
        source_branch_id: Optional[str] = None,
    ) -> Branch:
        """Fork the source (default: active) branch; the fork becomes active."""
        project = self._target_project(project_id)
        source_id = source_branch_id or project.resolve_branch(self._active_branch_id).id
        updated, branch = engine.create_branch(project, name, source_id, created_at=self._clock())

        self._active_project_id = updated.id
        self._active_branch_id = branch.id
        self._commit(
            engine.replace_project(self._projects, updated),
            event="branch_created",
            reference_id=branch.id,
            message=f"Branch '{branch.name}' forked from {source_id} in '{project.name}'",
        )
        return branch

    # ------------------------------------------------------------------ #
    #  Export / open                                                     #
    # ------------------------------------------------------------------ #
    def export_version(
        self,
        project_id: str,
        branch_id: str,
        version_id: str,
        dest_dir: str | Path,
    ) -> Path:
        version = self.get_version(project_id, branch_id, version_id)
        if not version.content:
            raise InputError(f"Version {version.version_label} has no content to export")
        target = write_text_export(version.content, Path(dest_dir) / export_file_name(version))
        logger.info(f"Exported {version.version_label} to {target}")
        return target

    def open_version_externally(self, project_id: str, branch_id: str, version_id: str) -> None:
        version = self.get_version(project_id, branch_id, version_id)
        if not version.stored_path:
            raise StorageError(f"Version {version.version_label} has no stored source file")
        self._storage.open_externally(version.stored_path)

    # ------------------------------------------------------------------ #
    #  Internal helpers                                                  #
    # ------------------------------------------------------------------ #
    def _target_project(self, project_id: Optional[str]) -> Project:
        target_id = project_id or self._active_project_id
        if target_id is None:
            raise InputError("No project selected")
        return self.get_project(target_id)

    def _store(self, upload: UploadedFile, version_id: str) -> Optional[str]:
        stored = self._storage.store_raw_file(
            source_path=upload.source_path,
            version_id=version_id,
            original_name=upload.original_name,
        )
        if stored is None:
            logger.warning(f"Raw file for {upload.original_name} not stored; version keeps text only")
        return stored

    def _discard_stored(self, stored_path: Optional[str]) -> None:
        """Remove the raw file stored for an upload the engine rejected."""
        if stored_path and not self._storage.delete_raw_file(stored_path):
            logger.warning(f"Orphaned raw file left behind: {stored_path}")

    def _commit(self, projects: Iterable[Project], *, event: str, reference_id: str, message: str) -> None:
        self._projects = tuple(projects)
        try:
            self._repo.persist(self._projects)
        except PersistenceError as ex:
            logger.error(f"{event} applied in memory but not persisted: {ex}")
            self._log_event(event, reference_id, f"{message} (not persisted: {ex})", level="ERROR")
            raise
        self._log_event(event, reference_id, message)

    def _cleanup(self, paths: Iterable[str], *, reference_id: str) -> None:
        """Delete raw files no surviving version references; failures only warn."""
        still_referenced = engine.stored_paths(self._projects)
        failed: List[str] = []
        for location in paths:
            if location in still_referenced:
                continue
            if not self._storage.delete_raw_file(location):
                failed.append(location)
        if failed:
            logger.warning(f"Raw file cleanup incomplete for {reference_id}: {', '.join(failed)}")
            self._log_event(
                "cleanup_failed", reference_id, f"Could not delete: {', '.join(failed)}", level="WARNING"
            )

    def _log_event(self, event: str, reference_id: str, message: str, *, level: str = "INFO") -> None:
        if self._events is None:
            return
        self._events.log(FEATURE, event, reference_id=reference_id, message=message, level=level)
