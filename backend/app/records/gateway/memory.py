from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Tuple

from app.records.gateway.base import QueryGateway
from app.records.models import IncidentRecord, QueryResult, RecordResult
from app.records.utils import day_bounds, page_offset

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _date_desc(rows: Iterable[IncidentRecord]) -> List[IncidentRecord]:
    return sorted(rows, key=lambda r: r.incident_date or _EPOCH, reverse=True)


@dataclass
class MemoryGateway(QueryGateway):
    """
    In-memory incident table.

    Used for the demo backend and in tests. Query semantics mirror the
    PostgREST gateway: same filters, ordering, paging and counts.
    """

    records: Dict[Tuple[int, str], IncidentRecord] = field(default_factory=dict)
    fail_with: str | None = None

    def upsert(self, record: IncidentRecord) -> None:
        self.records[(record.incident_number, record.unit_id)] = record

    def load(self, records: Iterable[IncidentRecord]) -> None:
        for record in records:
            self.upsert(record)

    def _page(self, rows: List[IncidentRecord], *, page: int, limit: int) -> QueryResult:
        offset = page_offset(page, limit)
        return QueryResult(rows=rows[offset : offset + limit], count=len(rows))

    async def recent_incidents(self, *, page: int, limit: int, since: datetime) -> QueryResult:
        if self.fail_with:
            return QueryResult(error=self.fail_with)
        rows = [r for r in self.records.values() if r.incident_date is not None and r.incident_date > since]
        return self._page(_date_desc(rows), page=page, limit=limit)

    async def incidents_by_date(self, *, day: date, page: int, limit: int) -> QueryResult:
        if self.fail_with:
            return QueryResult(error=self.fail_with)
        start, end = day_bounds(day)
        rows = [r for r in self.records.values() if r.incident_date is not None and start <= r.incident_date < end]
        return self._page(_date_desc(rows), page=page, limit=limit)

    async def incidents_by_number(self, incident_number: int) -> QueryResult:
        if self.fail_with:
            return QueryResult(error=self.fail_with)
        rows = [r for r in self.records.values() if r.incident_number == incident_number]
        return QueryResult(rows=sorted(rows, key=lambda r: r.unit_id))

    async def get_incident(self, incident_number: int, unit_id: str) -> RecordResult:
        if self.fail_with:
            return RecordResult(error=self.fail_with)
        return RecordResult(record=self.records.get((incident_number, unit_id)))
