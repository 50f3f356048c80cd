"""
Calendar-date helpers.

Snapshot dates are plain `YYYY-MM-DD` strings; ordering uses the epoch
milliseconds of UTC midnight on that date.
"""
from __future__ import annotations

from datetime import date, datetime, timezone


def parse_iso_date(s: str | None) -> date | None:
    """Parse ISO date string (YYYY-MM-DD) to date."""
    if not s:
        return None
    try:
        return date.fromisoformat(s[:10])
    except (ValueError, TypeError):
        return None


def parse_ymd(s: str) -> date:
    """Parse YYYY-MM-DD string to date. Raises ValueError on failure."""
    return date.fromisoformat(s)


def normalize_date(s: str) -> str:
    """Canonical YYYY-MM-DD spelling of a date string. Raises ValueError on failure."""
    return parse_ymd(s).isoformat()


def date_timestamp(s: str) -> int:
    """Epoch milliseconds of UTC midnight for a YYYY-MM-DD string."""
    d = parse_ymd(s)
    dt = datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def today_iso() -> str:
    return date.today().isoformat()


def utc_now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)
