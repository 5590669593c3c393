from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from typing import Any, List, Mapping

from app.records.errors import MalformedContent
from app.records.models import TimelineEntry, TimelineResult, TimelineStatus

logger = logging.getLogger("ems_viewer.timeline")

EMPTY_MESSAGE = "No timeline data available."
ERROR_MESSAGE = "Error loading timeline data."

# Fixed US-style formats used by the CAD export, independent of locale.
DATE_FORMAT = "%m/%d/%Y"
TIME_FORMAT = "%H:%M:%S"

_CAPITAL = re.compile(r"([A-Z])")


def format_status(key: str) -> str:
    """notifiedByDispatch -> Notified By Dispatch"""
    spaced = _CAPITAL.sub(r" \1", key)
    if spaced:
        spaced = spaced[0].upper() + spaced[1:]
    return spaced.strip()


def parse_sort_key(date_str: Any, time_str: Any) -> datetime | None:
    if not isinstance(date_str, str) or not isinstance(time_str, str):
        return None
    try:
        return datetime.strptime(f"{date_str.strip()} {time_str.strip()}", f"{DATE_FORMAT} {TIME_FORMAT}")
    except ValueError:
        return None


def load_content(content: Any) -> Any:
    """Decode the record's content document; raises MalformedContent."""
    if isinstance(content, Mapping):
        return content
    if not isinstance(content, (str, bytes)):
        raise MalformedContent("content is missing")
    try:
        doc = json.loads(content)
    except ValueError as e:
        raise MalformedContent(f"content is not valid JSON: {e}") from e
    if doc is None:
        raise MalformedContent("content is null")
    return doc


def extract_times(doc: Any) -> Mapping[str, Any]:
    if not isinstance(doc, Mapping):
        return {}
    incident_times = doc.get("incidentTimes")
    if not isinstance(incident_times, Mapping):
        return {}
    times = incident_times.get("times")
    return times if isinstance(times, Mapping) else {}


def build_entries(times: Mapping[str, Any]) -> List[TimelineEntry]:
    entries: List[TimelineEntry] = []
    for key, value in times.items():
        value = value if isinstance(value, Mapping) else {}
        date_str = value.get("date")
        time_str = value.get("time")
        entries.append(
            TimelineEntry(
                key=str(key),
                status=format_status(str(key)),
                date=date_str if isinstance(date_str, str) else "",
                time=time_str if isinstance(time_str, str) else "",
                sort_key=parse_sort_key(date_str, time_str),
            )
        )
    # sorted() is stable: equal timestamps keep source order. Unparseable
    # stamps go last, also in source order.
    return sorted(entries, key=lambda e: (e.sort_key is None, e.sort_key or datetime.min))


def normalize_timeline(content: Any) -> TimelineResult:
    try:
        doc = load_content(content)
    except MalformedContent as e:
        logger.warning("timeline unavailable: %s", e)
        return TimelineResult(status=TimelineStatus.error, message=ERROR_MESSAGE)

    times = extract_times(doc)
    if not times:
        return TimelineResult(status=TimelineStatus.empty, message=EMPTY_MESSAGE)

    return TimelineResult(status=TimelineStatus.ok, entries=build_entries(times))
