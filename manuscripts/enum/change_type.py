"""Change magnitude categories."""
from __future__ import annotations

from enum import Enum


class ChangeType(str, Enum):
    """Classification of a version relative to its predecessor."""

    INITIAL = "Initial"
    MAJOR_UPDATE = "Major Update"
    MINOR_UPDATE = "Minor Update"
    TWEAK = "Tweak"
