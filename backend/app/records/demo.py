from __future__ import annotations

import json
from datetime import datetime, timedelta
from typing import Any, Dict, List

from app.records.models import IncidentRecord
from app.records.utils import now_utc

# (incident_number, unit_id, hours ago, location, incident_type)
_DEMO_ROWS = [
    (25001, "MRS-1", 2, "12 Washington Valley Rd", "Fall"),
    (25001, "MRS-2", 2, "12 Washington Valley Rd", "Fall"),
    (25002, "MRS-1", 9, "400 Mountain Blvd", "Chest Pain"),
    (25003, "MRS-3", 20, None, "Motor Vehicle Collision"),
    (25004, "MRS-1", 31, "88 Stirling Rd", None),
    (25005, "MRS-2", 50, "1 Chimney Rock Rd", "Difficulty Breathing"),
    (25006, "MRS-1", 75, "220 Somerset St", "Unconscious Person"),
    (25007, "MRS-3", 110, "9 Hillcrest Ave", "Lift Assist"),
    (24990, "MRS-1", 24 * 10, "501 Route 22", "Fire Standby"),
]


def _stamp(dt: datetime) -> Dict[str, str]:
    return {"date": dt.strftime("%m/%d/%Y"), "time": dt.strftime("%H:%M:%S")}


def demo_content(dispatched: datetime, *, location: str | None) -> Dict[str, Any]:
    """A content document in the shape the CAD export writes."""
    times = {
        "notifiedByDispatch": _stamp(dispatched),
        "enRoute": _stamp(dispatched + timedelta(minutes=2)),
        "arrivedOnScene": _stamp(dispatched + timedelta(minutes=9)),
        "arrivedAtPatient": _stamp(dispatched + timedelta(minutes=10)),
        "departedScene": _stamp(dispatched + timedelta(minutes=31)),
        "arrivedAtDestination": _stamp(dispatched + timedelta(minutes=48)),
        "unitBackInService": _stamp(dispatched + timedelta(minutes=75)),
    }
    return {
        "incidentTimes": {"times": times},
        "incidentLocation": {"street_address": location or "", "state": "NJ"},
    }


def demo_incidents(now: datetime | None = None) -> List[IncidentRecord]:
    t = now or now_utc()
    out: List[IncidentRecord] = []
    for number, unit, hours_ago, location, incident_type in _DEMO_ROWS:
        dispatched = t - timedelta(hours=hours_ago)
        out.append(
            IncidentRecord(
                incident_number=number,
                unit_id=unit,
                incident_date=dispatched,
                location=location,
                incident_type=incident_type,
                content=json.dumps(demo_content(dispatched, location=location)),
            )
        )
    return out
