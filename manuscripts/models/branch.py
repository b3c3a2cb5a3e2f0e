"""Branch: a named, newest-first sequence of versions."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple

from manuscripts.models.version import ManuscriptVersion


@dataclass(frozen=True)
class Branch:
    id: str
    name: str
    versions: Tuple[ManuscriptVersion, ...] = ()
    created_at: int = 0

    @property
    def head(self) -> Optional[ManuscriptVersion]:
        """Current version (index 0) or None for an empty branch."""
        return self.versions[0] if self.versions else None

    def index_of(self, version_id: str) -> int:
        for idx, version in enumerate(self.versions):
            if version.id == version_id:
                return idx
        return -1

    def find_version(self, version_id: str) -> Optional[ManuscriptVersion]:
        idx = self.index_of(version_id)
        return self.versions[idx] if idx >= 0 else None

    def predecessor_of(self, version_id: str) -> Optional[ManuscriptVersion]:
        """Return the next-older version, or None for the oldest/unknown id."""
        idx = self.index_of(version_id)
        if idx < 0 or idx + 1 >= len(self.versions):
            return None
        return self.versions[idx + 1]

    def with_versions(self, versions: Iterable[ManuscriptVersion]) -> "Branch":
        return replace(self, versions=tuple(versions))
