"""
Word-level diff between two text blobs.

Texts are split into word runs and single punctuation characters, each
carrying the whitespace that follows it; only a leading whitespace run is a
token of its own. The token lists are aligned with ``difflib.SequenceMatcher``
(longest matching blocks, junk heuristics off). One computation feeds both
the unified stream and the two split panes.
"""
from __future__ import annotations

import difflib
import re
from functools import cached_property
from typing import Iterator, List, Tuple

from manuscripts.dto.diff_segment import DiffSegment
from manuscripts.enum.diff_kind import DiffKind

_TOKEN_RE = re.compile(r"\w+\s*|[^\w\s]\s*|\s+")


def tokenize(text: str) -> List[str]:
    """Split *text* into tokens whose concatenation is *text* again."""
    return _TOKEN_RE.findall(text)


class WordDiff:
    """Lazy, restartable sequence of diff segments for one comparison.

    Segments are computed on first access and shared by every view, so the
    left and right panes of a split view always agree.
    """

    def __init__(self, old_text: str, new_text: str) -> None:
        self.old_text = old_text
        self.new_text = new_text

    @cached_property
    def segments(self) -> Tuple[DiffSegment, ...]:
        return tuple(_coalesce(self._raw_segments()))

    def _raw_segments(self) -> Iterator[DiffSegment]:
        old_tokens = tokenize(self.old_text)
        new_tokens = tokenize(self.new_text)
        matcher = difflib.SequenceMatcher(None, old_tokens, new_tokens, autojunk=False)
        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == "equal":
                yield DiffSegment("".join(old_tokens[i1:i2]), DiffKind.UNCHANGED)
                continue
            if tag in ("delete", "replace"):
                yield DiffSegment("".join(old_tokens[i1:i2]), DiffKind.REMOVED)
            if tag in ("insert", "replace"):
                yield DiffSegment("".join(new_tokens[j1:j2]), DiffKind.ADDED)

    def __iter__(self) -> Iterator[DiffSegment]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    # ---------------- views ---------------- #
    def unified(self) -> Tuple[DiffSegment, ...]:
        return self.segments

    def left_pane(self) -> Tuple[DiffSegment, ...]:
        """Old-side view: ``added`` segments suppressed."""
        return tuple(s for s in self.segments if s.kind is not DiffKind.ADDED)

    def right_pane(self) -> Tuple[DiffSegment, ...]:
        """New-side view: ``removed`` segments suppressed."""
        return tuple(s for s in self.segments if s.kind is not DiffKind.REMOVED)

    @property
    def has_changes(self) -> bool:
        return any(s.kind is not DiffKind.UNCHANGED for s in self.segments)

    def count_words(self, kind: DiffKind) -> int:
        return sum(len(re.findall(r"\w+", s.text)) for s in self.segments if s.kind is kind)


def _coalesce(segments: Iterator[DiffSegment]) -> Iterator[DiffSegment]:
    pending: DiffSegment | None = None
    for segment in segments:
        if not segment.text:
            continue
        if pending is not None and pending.kind is segment.kind:
            pending = DiffSegment(pending.text + segment.text, segment.kind)
            continue
        if pending is not None:
            yield pending
        pending = segment
    if pending is not None:
        yield pending


def diff_words(old_text: str, new_text: str) -> WordDiff:
    return WordDiff(old_text, new_text)
