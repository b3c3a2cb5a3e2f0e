"""Project file-format tags."""
from __future__ import annotations

from enum import Enum
from pathlib import Path


class ProjectType(str, Enum):
    """File format of a project, fixed from its first upload."""

    DOCX = "docx"
    MD = "md"
    TXT = "txt"

    @classmethod
    def from_filename(cls, filename: str) -> "ProjectType":
        """Map a filename to its project type; unknown extensions map to TXT."""
        ext = Path(filename or "").suffix.lower().lstrip(".")
        try:
            return cls(ext)
        except ValueError:
            return cls.TXT
