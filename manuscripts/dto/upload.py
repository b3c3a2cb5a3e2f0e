"""Upload descriptor handed to the version engine."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class UploadedFile:
    """File metadata of an upload, without the derived version fields."""

    original_name: str
    size: int
    source_path: Optional[str] = None

    @classmethod
    def from_path(cls, path: str | Path) -> "UploadedFile":
        p = Path(path)
        return cls(original_name=p.name, size=p.stat().st_size, source_path=str(p))
