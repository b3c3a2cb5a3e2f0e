"""
Text extraction for uploaded manuscript files.

- .txt / .md: decoded as UTF-8 (BOM tolerated); undecodable bytes are
  replaced and a warning is logged.
- .docx: body paragraphs and table cell paragraphs via python-docx, in
  document order, joined by blank lines. Formatting is dropped.
"""
from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import Iterator, Optional

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from docx.table import Table
from docx.text.paragraph import Paragraph

from manuscripts.exceptions.errors import ExtractionError, InputError, UnsupportedFileTypeError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".txt", ".md", ".docx")
PARAGRAPH_SEPARATOR = "\n\n"


def validate_upload(path: Optional[str | Path]) -> Path:
    """
    Check an upload before any state change.

    Raises:
        InputError: nothing selected or the file does not exist
        UnsupportedFileTypeError: extension is not txt, md or docx
    """
    if path is None or not str(path).strip():
        raise InputError("No file selected")
    p = Path(path)
    if p.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileTypeError(
            f"Unsupported file type {p.suffix or '(none)'!r} for {p.name!r}; "
            f"expected one of {', '.join(SUPPORTED_EXTENSIONS)}"
        )
    if not p.is_file():
        raise InputError(f"File not found: {p}")
    return p


class TextExtractor:
    """Extracts plain text from txt, md and docx uploads."""

    def extract(self, path: str | Path) -> str:
        p = validate_upload(path)
        if p.suffix.lower() == ".docx":
            return self._extract_docx(p)
        return self._extract_plain(p)

    # ---------------- plain text ---------------- #
    @staticmethod
    def _extract_plain(path: Path) -> str:
        try:
            data = path.read_bytes()
        except OSError as ex:
            raise ExtractionError(f"Cannot read {path.name!r}: {ex}") from ex
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError:
            logger.warning(f"{path.name} is not valid UTF-8; undecodable bytes replaced")
            return data.decode("utf-8-sig", errors="replace")

    # ---------------- docx ---------------- #
    def _extract_docx(self, path: Path) -> str:
        try:
            document = Document(str(path))
            paragraphs = list(self._iter_paragraph_texts(document))
        except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError, SyntaxError, OSError) as ex:
            raise ExtractionError(f"Cannot extract text from {path.name!r}: {ex}") from ex
        return PARAGRAPH_SEPARATOR.join(paragraphs)

    def _iter_paragraph_texts(self, container) -> Iterator[str]:
        for block in container.iter_inner_content():
            if isinstance(block, Paragraph):
                yield block.text
            elif isinstance(block, Table):
                for row in block.rows:
                    for cell in row.cells:
                        yield from self._iter_paragraph_texts(cell)


def extract_text(path: str | Path) -> str:
    return TextExtractor().extract(path)
