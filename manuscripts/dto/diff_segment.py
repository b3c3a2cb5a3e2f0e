"""Diff segment DTO."""
from __future__ import annotations

from dataclasses import dataclass

from manuscripts.enum.diff_kind import DiffKind


@dataclass(frozen=True)
class DiffSegment:
    text: str
    kind: DiffKind
