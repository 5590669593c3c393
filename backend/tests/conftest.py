"""Shared fixtures: incident rows and an in-memory gateway."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from app.records.gateway.memory import MemoryGateway
from app.records.models import IncidentRecord

NOW = datetime(2025, 11, 10, 15, 0, 0, tzinfo=timezone.utc)


def make_record(number: int, unit: str, when: datetime, **extra) -> IncidentRecord:
    content = extra.pop(
        "content",
        json.dumps(
            {
                "incidentTimes": {
                    "times": {
                        "notifiedByDispatch": {"date": when.strftime("%m/%d/%Y"), "time": when.strftime("%H:%M:%S")},
                    }
                }
            }
        ),
    )
    return IncidentRecord(incident_number=number, unit_id=unit, incident_date=when, content=content, **extra)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def gateway():
    """
    46 rows inside the 7-day window: incidents 1000..1044 on MRS-1, one every
    90 minutes back from NOW, plus MRS-2 on incident 1000. Two more rows are
    8 and 12 days old.
    """
    gw = MemoryGateway()
    for i in range(45):
        gw.upsert(make_record(1000 + i, "MRS-1", NOW - timedelta(minutes=90 * i), location=f"{i} Main St"))
    gw.upsert(make_record(1000, "MRS-2", NOW - timedelta(minutes=5), incident_type="Fall"))
    gw.upsert(make_record(900, "MRS-1", NOW - timedelta(days=12)))
    gw.upsert(make_record(901, "MRS-3", NOW - timedelta(days=8)))
    return gw


@pytest.fixture
def record():
    """Factory for IncidentRecord rows: record(number, unit, when, **fields)."""
    return make_record
