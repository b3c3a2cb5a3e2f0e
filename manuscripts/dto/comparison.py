"""Comparison of two versions of one branch."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from core.helpers.date_time_helper import millis_to_local_str
from manuscripts.logic.diff_renderer import DiffHtmlRenderer
from manuscripts.logic.word_diff import WordDiff
from manuscripts.models.version import ManuscriptVersion


@dataclass(frozen=True)
class Comparison:
    """Old/new version pair plus the word diff between their contents."""

    old: ManuscriptVersion
    new: ManuscriptVersion
    diff: WordDiff = field(compare=False)
    tz_name: Optional[str] = field(default=None, compare=False)

    @property
    def old_label(self) -> str:
        return self.old.version_label

    @property
    def new_label(self) -> str:
        return self.new.version_label

    def heading(self, version: ManuscriptVersion) -> str:
        """Version label plus its upload time in the display timezone."""
        return f"{version.version_label} ({millis_to_local_str(version.metadata.timestamp, self.tz_name)})"

    def render_html(self, mode: str = "split") -> str:
        return DiffHtmlRenderer().render(
            self.diff, mode=mode, old_label=self.heading(self.old), new_label=self.heading(self.new)
        )
