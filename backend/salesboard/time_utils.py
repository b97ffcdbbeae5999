from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional


DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_RE = re.compile(r"^\d{2}:\d{2}$")


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """
    Serializes datetime to ISO-8601 with trailing 'Z'.
    If dt is naive, it is treated as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt_utc = dt.astimezone(timezone.utc).replace(microsecond=0)
    return dt_utc.isoformat().replace("+00:00", "Z")


def local_now() -> datetime:
    """Wall-clock 'now' used for form defaults (local time, like the dashboard)."""
    return datetime.now()


def today_str(now: Optional[datetime] = None) -> str:
    """Local date as YYYY-MM-DD."""
    now = now or local_now()
    return now.strftime("%Y-%m-%d")


def current_time_str(now: Optional[datetime] = None) -> str:
    """Local time of day as zero-padded 24h HH:MM."""
    now = now or local_now()
    return now.strftime("%H:%M")


def is_iso_date(value: Optional[str]) -> bool:
    """
    True for a real calendar date in YYYY-MM-DD form.

    The shape check matters: range filtering compares these strings
    lexicographically, which only matches chronological order when every
    value is zero-padded.
    """
    if not value or not DATE_RE.match(value):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def is_hhmm(value: Optional[str]) -> bool:
    """True for a zero-padded 24h HH:MM time of day."""
    if not value or not TIME_RE.match(value):
        return False
    hours, minutes = value.split(":")
    return int(hours) < 24 and int(minutes) < 60
