"""Repository configuration."""

from __future__ import annotations
from dataclasses import dataclass, replace
from pathlib import Path


@dataclass(frozen=True)
class RepoConfig:
    """Configuration for the manuscripts data directory."""

    root_path: str
    """Data directory holding the metadata document and raw files"""

    metadata_filename: str = "data.json"
    """Name of the JSON metadata document inside root_path"""

    files_dirname: str = "files"
    """Name of the raw-file directory inside root_path"""

    @property
    def metadata_path(self) -> Path:
        return Path(self.root_path) / self.metadata_filename

    @property
    def files_path(self) -> Path:
        return Path(self.root_path) / self.files_dirname

    def with_root(self, root_path: str | Path) -> "RepoConfig":
        return replace(self, root_path=str(root_path))
