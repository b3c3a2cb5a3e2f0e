"""Writing extracted version text back to disk.

``.docx`` targets get a real Word package (one paragraph per blank-line
separated block); every other target is written as UTF-8 text.
"""
from __future__ import annotations

from pathlib import Path

from docx import Document

from manuscripts.logic.text_extraction import PARAGRAPH_SEPARATOR


def write_text_export(content: str, target: str | Path) -> Path:
    path = Path(target)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".docx":
        document = Document()
        for block in content.split(PARAGRAPH_SEPARATOR):
            document.add_paragraph(block)
        document.save(str(path))
    else:
        path.write_text(content, encoding="utf-8")
    return path
