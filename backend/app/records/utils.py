from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def to_camel(s: str) -> str:
    parts = s.split("_")
    return parts[0] + "".join(p[:1].upper() + p[1:] for p in parts[1:])


def total_pages(total_count: int, page_size: int) -> int:
    if total_count <= 0:
        return 0
    return math.ceil(total_count / page_size)


def page_offset(page: int, page_size: int) -> int:
    return (max(1, page) - 1) * page_size


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """[day 00:00 UTC, day+1 00:00 UTC)"""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def to_iso_z(dt: datetime) -> str:
    """Millisecond ISO8601 in UTC with a trailing 'Z' (what PostgREST filters expect)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def parse_datetime(value: Any) -> datetime | None:
    """
    Best-effort datetime parsing for backend rows.

    Supports:
    - ISO8601 strings (with or without 'Z', with or without a 'T')
    - epoch seconds / millis (int/float)
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    if isinstance(value, (int, float)):
        # heuristically treat > 10^12 as ms
        seconds = float(value) / 1000.0 if value > 1_000_000_000_000 else float(value)
        return datetime.fromtimestamp(seconds, tz=timezone.utc)

    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
            return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
        except ValueError:
            return None

    return None


def resolve_zone(name: str | None) -> tzinfo | None:
    """tzinfo for "UTC" or an IANA key; None when the key is unknown."""
    key = (name or "").strip()
    if not key or key.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(key)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return None


def format_display_datetime(value: datetime | None, tz: tzinfo = timezone.utc) -> str:
    """MM/DD/YYYY HH:MM on a 24-hour clock, in the given zone."""
    if value is None:
        return "N/A"
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(tz).strftime("%m/%d/%Y %H:%M")
