"""
Change classification and semantic version labels.

``classify`` maps a similarity score to a ``ChangeType`` using configurable
thresholds; ``next_version_label`` applies the matching increment to the
predecessor's ``V<major>.<minor>.<patch>`` label.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from manuscripts.enum.change_type import ChangeType

INITIAL_LABEL = "V1.0.0"
_FALLBACK_PARTS: Tuple[int, int, int] = (1, 0, 0)


@dataclass(frozen=True)
class ClassifierThresholds:
    """Similarity cut-offs: below ``major`` is a major update, below ``minor`` a minor one."""

    major: float = 70.0
    minor: float = 90.0

    def __post_init__(self) -> None:
        if not (0.0 <= self.major <= self.minor <= 100.0):
            raise ValueError(
                f"Invalid thresholds major={self.major!r} minor={self.minor!r}; "
                "expected 0 <= major <= minor <= 100"
            )


DEFAULT_THRESHOLDS = ClassifierThresholds()


def classify(
    similarity: Optional[float],
    is_first: bool,
    thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS,
) -> ChangeType:
    """Classify a version by its similarity to the predecessor."""
    if is_first or similarity is None:
        return ChangeType.INITIAL
    if similarity < thresholds.major:
        return ChangeType.MAJOR_UPDATE
    if similarity < thresholds.minor:
        return ChangeType.MINOR_UPDATE
    return ChangeType.TWEAK


def parse_version_label(label: Optional[str]) -> Tuple[int, int, int]:
    """Parse ``"V2.3.1"`` into ``(2, 3, 1)``; malformed labels give ``(1, 0, 0)``."""
    if not label:
        return _FALLBACK_PARTS
    value = label.strip()
    if value.startswith("V"):
        value = value[1:]
    parts = value.split(".")
    if len(parts) != 3:
        return _FALLBACK_PARTS
    try:
        major, minor, patch = (int(p) for p in parts)
    except ValueError:
        return _FALLBACK_PARTS
    return major, minor, patch


def format_version_label(major: int, minor: int, patch: int) -> str:
    return f"V{major}.{minor}.{patch}"


def next_version_label(previous_label: Optional[str], change_type: ChangeType) -> str:
    """Derive the label that follows *previous_label* for *change_type*."""
    if change_type is ChangeType.INITIAL:
        return INITIAL_LABEL

    major, minor, patch = parse_version_label(previous_label)
    if change_type is ChangeType.MAJOR_UPDATE:
        major, minor, patch = major + 1, 0, 0
    elif change_type is ChangeType.MINOR_UPDATE:
        minor, patch = minor + 1, 0
    else:
        patch += 1
    return format_version_label(major, minor, patch)
