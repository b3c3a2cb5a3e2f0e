# core/common/app_context.py
"""
Global runtime context & service registry for ManuscriptGuard.

IMPORTANT ARCHITECTURE RULE:
- ConfigService is the SINGLE source of truth for the data directory.
- Nothing is built at import time; the session is wired on first access.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.config.config_service import ConfigService, config_service
from core.logging.logic.logger import EventLogger

logger = logging.getLogger(__name__)


class AppContext:
    """Central runtime context (no GUI state)."""

    config: ConfigService = config_service

    _session = None  # type: ignore[var-annotated]
    _storage_location = None  # type: ignore[var-annotated]
    _comparison = None  # type: ignore[var-annotated]
    _event_log: Optional[EventLogger] = None

    # ---------- Service registry for DI -------------------------------
    services: dict[str, object] = {}

    @classmethod
    def register_service(cls, name: str, instance: object) -> None:
        cls.services[name] = instance

    @classmethod
    def get_service(cls, name: str) -> Optional[object]:
        return cls.services.get(name)

    # ---------- Lazy accessors (avoid import cycles) ------------------
    @classmethod
    def event_log(cls) -> EventLogger:
        if cls._event_log is None:
            cls._event_log = EventLogger(cls.config.storage.log_db_path)
            cls.register_service("event_log", cls._event_log)
        return cls._event_log

    @classmethod
    def session(cls):
        """
        Lazy accessor for the ProjectSession built from the current config.
        Loads the metadata document on first access.
        """
        if cls._session is None:
            from manuscripts.adapters.filesystem_storage_adapter import FilesystemStorageAdapter
            from manuscripts.logic.classification import ClassifierThresholds
            from manuscripts.repository.json_project_repository import JsonProjectRepository
            from manuscripts.services.project_session import ProjectSession

            repo_config = cls._repo_config()
            session = ProjectSession(
                repository=JsonProjectRepository(repo_config),
                storage=FilesystemStorageAdapter(repo_config.files_path),
                thresholds=ClassifierThresholds(
                    major=cls.config.versioning.major_threshold,
                    minor=cls.config.versioning.minor_threshold,
                ),
                event_log=cls.event_log(),
            )
            session.load()
            cls._session = session
            cls.register_service("project_session", session)
            logger.info(f"Session ready with data directory {repo_config.root_path}")
        return cls._session

    @classmethod
    def storage_location(cls):
        if cls._storage_location is None:
            from manuscripts.services.storage_location_service import StorageLocationService

            cls._storage_location = StorageLocationService(
                session=cls.session(),
                config_service=cls.config,
                repo_config=cls._repo_config(),
            )
            cls.register_service("storage_location", cls._storage_location)
        return cls._storage_location

    @classmethod
    def comparison(cls):
        """ComparisonController over the session, headings in the configured timezone."""
        if cls._comparison is None:
            from manuscripts.controllers.comparison_controller import ComparisonController

            cls._comparison = ComparisonController(
                session=cls.session(),
                tz_name=cls.config.general.timezone,
            )
            cls.register_service("comparison", cls._comparison)
        return cls._comparison

    @classmethod
    def reset(cls, config: Optional[ConfigService] = None) -> None:
        """Drop all wired services, optionally switching the config source."""
        if cls._event_log is not None:
            cls._event_log.close()
        cls._session = None
        cls._storage_location = None
        cls._comparison = None
        cls._event_log = None
        cls.services = {}
        if config is not None:
            cls.config = config

    @classmethod
    def _repo_config(cls):
        from manuscripts.repository.repo_config import RepoConfig

        storage = cls.config.storage
        return RepoConfig(
            root_path=str(storage.data_dir),
            metadata_filename=storage.metadata_file,
            files_dirname=storage.files_dir,
        )
