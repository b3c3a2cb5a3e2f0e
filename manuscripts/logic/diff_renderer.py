"""
HTML rendering of a word diff.

Two modes over the same ``WordDiff``:
- ``unified``: one inline stream, additions underlined green, removals struck red;
- ``split``: old pane without additions, new pane without removals.
"""
from __future__ import annotations

import html
import logging
from pathlib import Path
from typing import Iterable

from manuscripts.dto.diff_segment import DiffSegment
from manuscripts.enum.diff_kind import DiffKind
from manuscripts.logic.word_diff import WordDiff

logger = logging.getLogger(__name__)

RENDER_MODES = ("unified", "split")


class DiffHtmlRenderer:
    """Generates a standalone HTML comparison report."""

    HEAD_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <title>{title}</title>
    <style>
        body {{ font-family: -apple-system, "Segoe UI", Helvetica, Arial, sans-serif; background: #f8fafc; color: #334155; margin: 0; padding: 20px; }}
        .container {{ max-width: 1600px; margin: 0 auto; background: #ffffff; border: 1px solid #e2e8f0; border-radius: 6px; }}
        .header {{ padding: 12px 16px; border-bottom: 1px solid #e2e8f0; font-weight: 600; }}
        .panes {{ display: flex; }}
        .pane {{ flex: 1; padding: 16px 24px; white-space: pre-wrap; font-family: ui-monospace, Menlo, Consolas, monospace; font-size: 13px; line-height: 1.8; }}
        .pane + .pane {{ border-left: 1px solid #e2e8f0; background: #f8fafc; }}
        .pane h4 {{ margin: 0 0 12px 0; font-size: 11px; text-transform: uppercase; color: #94a3b8; }}
        .added {{ background: #dcfce7; color: #166534; text-decoration: none; }}
        .removed {{ background: #fee2e2; color: #991b1b; text-decoration: line-through; }}
    </style>
</head>
<body>
<div class="container">
    <div class="header">{title}</div>
"""

    FOOT_TEMPLATE = """</div>
</body>
</html>
"""

    def render(
        self,
        diff: WordDiff,
        *,
        mode: str = "split",
        old_label: str = "Old Version",
        new_label: str = "New Version",
    ) -> str:
        """
        Render *diff* as an HTML document.

        Args:
            diff: Word diff to render
            mode: "unified" or "split"
            old_label: Heading for the old side
            new_label: Heading for the new side

        Returns:
            Complete HTML document as string
        """
        if mode not in RENDER_MODES:
            raise ValueError(f"Unsupported render mode: {mode!r}")

        title = html.escape(f"{old_label} → {new_label}")
        parts = [self.HEAD_TEMPLATE.format(title=title)]
        if mode == "unified":
            parts.append(f'    <div class="panes"><div class="pane">{self._spans(diff.unified())}</div></div>\n')
        else:
            parts.append('    <div class="panes">\n')
            parts.append(
                f'        <div class="pane"><h4>{html.escape(old_label)}</h4>{self._spans(diff.left_pane())}</div>\n'
            )
            parts.append(
                f'        <div class="pane"><h4>{html.escape(new_label)}</h4>{self._spans(diff.right_pane())}</div>\n'
            )
            parts.append("    </div>\n")
        parts.append(self.FOOT_TEMPLATE)
        return "".join(parts)

    def write(self, diff: WordDiff, output_path: str | Path, **kwargs) -> Path:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(diff, **kwargs), encoding="utf-8")
        logger.info(f"Comparison report written to {path.resolve()}")
        return path

    @staticmethod
    def _spans(segments: Iterable[DiffSegment]) -> str:
        out = []
        for segment in segments:
            text = html.escape(segment.text)
            if segment.kind is DiffKind.ADDED:
                out.append(f'<ins class="added">{text}</ins>')
            elif segment.kind is DiffKind.REMOVED:
                out.append(f'<del class="removed">{text}</del>')
            else:
                out.append(f"<span>{text}</span>")
        return "".join(out)
