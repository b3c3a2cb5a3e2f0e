"""Download/export file naming for versions."""
from __future__ import annotations

from pathlib import PurePath

from core.helpers.date_time_helper import millis_to_date_str
from manuscripts.models.version import ManuscriptVersion

DEFAULT_BASE_NAME = "manuscript"
DEFAULT_EXTENSION = "txt"


def export_file_name(version: ManuscriptVersion) -> str:
    """
    Build ``<base>_<label>_<YYYY-MM-DD>.<ext>`` from the version's original name.

    ``draft.final.md`` keeps ``draft.final`` as base; missing parts fall back
    to ``manuscript`` and ``txt``.
    """
    original = PurePath(version.metadata.original_name or "")
    base = original.stem or DEFAULT_BASE_NAME
    extension = original.suffix.lstrip(".") or DEFAULT_EXTENSION
    date_str = millis_to_date_str(version.metadata.timestamp)
    return f"{base}_{version.version_label}_{date_str}.{extension}"
