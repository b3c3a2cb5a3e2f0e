"""Diff segment kinds."""
from __future__ import annotations

from enum import Enum


class DiffKind(str, Enum):
    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"
