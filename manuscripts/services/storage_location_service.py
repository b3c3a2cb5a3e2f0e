"""
StorageLocationService - moves the data directory to a new root.

Relocation is all-or-nothing: the raw files are copied and the rewritten
metadata document is written at the destination before the user config is
switched over. Until that switch the old location remains the source of
truth; any failure removes the partial copy.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List, Optional

from core.config.config_service import ConfigService, default_data_dir
from manuscripts.adapters.filesystem_storage_adapter import FilesystemStorageAdapter
from manuscripts.exceptions.errors import StorageError, StorageMigrationError
from manuscripts.logic.version_engine import rewrite_stored_paths, stored_paths
from manuscripts.repository.json_project_repository import JsonProjectRepository
from manuscripts.repository.repo_config import RepoConfig
from manuscripts.services.project_session import FEATURE, ProjectSession

logger = logging.getLogger(__name__)

CONFIG_SECTION = "Storage"
CONFIG_KEY = "data_dir"


class StorageLocationService:
    """Relocates metadata document and raw files of a running session."""

    def __init__(
        self,
        *,
        session: ProjectSession,
        config_service: ConfigService,
        repo_config: RepoConfig,
    ) -> None:
        self._session = session
        self._config = config_service
        self._repo_config = repo_config

    @property
    def current_root(self) -> Path:
        return Path(self._repo_config.root_path)

    @property
    def repo_config(self) -> RepoConfig:
        return self._repo_config

    def relocate(self, new_root: str | Path) -> Path:
        """
        Move the data directory to *new_root*.

        Args:
            new_root: Destination directory (created if missing)

        Returns:
            The resolved destination

        Raises:
            StorageMigrationError: copy, write or config update failed;
                nothing changed at the old location
        """
        old_cfg = self._repo_config
        target = Path(new_root).expanduser().resolve()
        if target == Path(old_cfg.root_path).expanduser().resolve():
            logger.info(f"Data directory already at {target}; nothing to relocate")
            return target

        new_cfg = old_cfg.with_root(target)
        if new_cfg.metadata_path.exists():
            raise StorageMigrationError(
                f"{new_cfg.metadata_path} already exists; refusing to overwrite another data directory"
            )

        old_files = Path(self._session.storage.get_files_directory()).resolve()
        created_root = not target.exists()
        copied: List[Path] = []
        try:
            new_cfg.files_path.mkdir(parents=True, exist_ok=True)
            for location in sorted(stored_paths(self._session.projects)):
                source = Path(location)
                if source.resolve().parent != old_files:
                    continue
                if not source.is_file():
                    logger.warning(f"Stored file missing during relocation: {source}")
                    continue
                dest = new_cfg.files_path / source.name
                shutil.copy2(source, dest)
                copied.append(dest)

            projects = rewrite_stored_paths(self._session.projects, old_files, new_cfg.files_path)
            new_repo = JsonProjectRepository(new_cfg)
            new_repo.persist(projects)
            self._config.set_user_value(CONFIG_SECTION, CONFIG_KEY, target.as_posix())
        except (OSError, StorageError) as ex:
            self._discard(new_cfg, copied, remove_root=created_root)
            logger.error(f"Relocation to {target} failed: {ex}")
            raise StorageMigrationError(f"Could not relocate data directory to {target}: {ex}") from ex

        self._session.rebind(
            repository=new_repo,
            storage=FilesystemStorageAdapter(new_cfg.files_path),
            projects=projects,
        )
        self._repo_config = new_cfg
        self._remove_old(old_cfg, old_files, copied)
        logger.info(f"Data directory relocated from {old_cfg.root_path} to {target}")
        self._log_relocation(old_cfg.root_path, target)
        return target

    def reset_to_default(self, default_root: Optional[str | Path] = None) -> Path:
        """
        Relocate back to the per-user default data directory.

        Without an explicit *default_root* the stored ``data_dir`` override is
        dropped afterwards, so the built-in default applies on the next start.
        """
        if default_root is not None:
            return self.relocate(default_root)
        target = self.relocate(default_data_dir())
        self._config.remove_user_value(CONFIG_SECTION, CONFIG_KEY)
        return target

    # ------------------------------------------------------------------ #
    #  Internal helpers                                                  #
    # ------------------------------------------------------------------ #
    @staticmethod
    def _discard(cfg: RepoConfig, copied: List[Path], *, remove_root: bool) -> None:
        for path in copied:
            try:
                path.unlink()
            except OSError as ex:
                logger.warning(f"Could not remove partial copy {path}: {ex}")
        try:
            if cfg.metadata_path.exists():
                cfg.metadata_path.unlink()
            if cfg.files_path.exists() and not any(cfg.files_path.iterdir()):
                cfg.files_path.rmdir()
            if remove_root and Path(cfg.root_path).exists() and not any(Path(cfg.root_path).iterdir()):
                Path(cfg.root_path).rmdir()
        except OSError as ex:
            logger.warning(f"Could not clean up {cfg.root_path}: {ex}")

    @staticmethod
    def _remove_old(cfg: RepoConfig, old_files: Path, copied: List[Path]) -> None:
        """Best-effort removal of the moved files at the old location."""
        for dest in copied:
            old = old_files / dest.name
            try:
                old.unlink()
            except OSError as ex:
                logger.warning(f"Old raw file {old} not removed: {ex}")
        try:
            if cfg.metadata_path.exists():
                cfg.metadata_path.unlink()
        except OSError as ex:
            logger.warning(f"Old metadata document {cfg.metadata_path} not removed: {ex}")

    def _log_relocation(self, old_root: str, new_root: Path) -> None:
        events = self._session.event_log
        if events is not None:
            events.log(
                FEATURE,
                "storage_relocated",
                reference_id=new_root.as_posix(),
                message=f"Data directory moved from {old_root} to {new_root}",
            )
