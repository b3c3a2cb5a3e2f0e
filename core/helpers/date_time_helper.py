"""
date_time_helper.py

Helper functions for conversion and formatting of date and time values.

Persisted timestamps are epoch milliseconds (UTC); log entries use ISO8601
UTC strings. Local display uses a configurable IANA timezone.
All features and modules should use ONLY these helpers for date/time logic.
"""

from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_DISPLAY_TZ = "UTC"


def now_millis() -> int:
    """Current UTC instant as epoch milliseconds."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def utc_now_iso() -> str:
    """
    Returns the current UTC time as an ISO8601 string (YYYY-MM-DDTHH:MM:SS+00:00).
    Used for logging and DB storage.
    """
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def millis_to_utc(millis: int) -> datetime:
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)


def millis_to_date_str(millis: int) -> str:
    """Format epoch milliseconds as ``YYYY-MM-DD`` (UTC calendar day)."""
    return millis_to_utc(millis).strftime("%Y-%m-%d")


def _zone(tz_name: str | None) -> ZoneInfo:
    try:
        return ZoneInfo(tz_name or DEFAULT_DISPLAY_TZ)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo(DEFAULT_DISPLAY_TZ)


def utc_to_local_str(utc_iso: str, tz_name: str | None = None) -> str:
    """
    Formats a UTC ISO8601 timestamp as a human-readable string for display.

    :param utc_iso: UTC time as ISO string (from DB/logs)
    :param tz_name: IANA timezone name; unknown names fall back to UTC
    :return: String in format "DD.MM.YYYY HH:mm:ss" (local time)
    """
    dt_utc = datetime.fromisoformat(utc_iso)
    if dt_utc.tzinfo is None:
        dt_utc = dt_utc.replace(tzinfo=timezone.utc)
    return dt_utc.astimezone(_zone(tz_name)).strftime("%d.%m.%Y %H:%M:%S")


def millis_to_local_str(millis: int, tz_name: str | None = None) -> str:
    return millis_to_utc(millis).astimezone(_zone(tz_name)).strftime("%d.%m.%Y %H:%M:%S")
