"""Immutable manuscript version snapshot."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from manuscripts.enum.change_type import ChangeType


@dataclass(frozen=True)
class VersionMetadata:
    """File metadata captured at upload time.

    ``timestamp`` is the creation instant in epoch milliseconds and ``size``
    the byte length of the original upload.
    """

    original_name: str
    timestamp: int
    version_label: str
    hash: str
    size: int
    stored_path: Optional[str] = None


@dataclass(frozen=True)
class ManuscriptVersion:
    """Content snapshot plus the fields derived from its predecessor.

    ``similarity_to_previous``, ``change_type`` and ``metadata.version_label``
    are produced by the version engine only.
    ``ai_analysis`` is free-form analysis text kept from earlier metadata
    documents; it is carried through unchanged.
    """

    id: str
    content: str
    metadata: VersionMetadata
    similarity_to_previous: Optional[float]
    change_type: ChangeType
    ai_analysis: Optional[str] = None

    @property
    def version_label(self) -> str:
        return self.metadata.version_label

    @property
    def stored_path(self) -> Optional[str]:
        return self.metadata.stored_path

    def with_derived(
        self,
        *,
        similarity_to_previous: Optional[float],
        change_type: ChangeType,
        version_label: str,
    ) -> "ManuscriptVersion":
        """Return a copy carrying recomputed derived fields."""
        return replace(
            self,
            similarity_to_previous=similarity_to_previous,
            change_type=change_type,
            metadata=replace(self.metadata, version_label=version_label),
        )

    def with_stored_path(self, stored_path: Optional[str]) -> "ManuscriptVersion":
        return replace(self, metadata=replace(self.metadata, stored_path=stored_path))
