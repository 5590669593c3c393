from __future__ import annotations

from datetime import date, datetime

from app.records.models import QueryResult, RecordResult


class QueryGateway:
    """Read-only access to the `rip_and_runs` table."""

    def for_session(self, access_token: str | None) -> "QueryGateway":
        # Gateways that enforce row-level security bind the user's token here.
        return self

    async def recent_incidents(self, *, page: int, limit: int, since: datetime) -> QueryResult:  # pragma: no cover
        raise NotImplementedError

    async def incidents_by_date(self, *, day: date, page: int, limit: int) -> QueryResult:  # pragma: no cover
        raise NotImplementedError

    async def incidents_by_number(self, incident_number: int) -> QueryResult:  # pragma: no cover
        raise NotImplementedError

    async def get_incident(self, incident_number: int, unit_id: str) -> RecordResult:  # pragma: no cover
        raise NotImplementedError
