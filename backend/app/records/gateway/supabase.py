from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Sequence, Tuple

import httpx

from app.records.gateway.base import QueryGateway
from app.records.models import TABLE, IncidentRecord, QueryResult, RecordResult
from app.records.utils import day_bounds, page_offset, to_iso_z

logger = logging.getLogger("ems_viewer.gateway.supabase")

Params = Sequence[Tuple[str, Any]]

# PostgREST answers 406 to a single-object request that matched no row.
_NO_ROW_STATUS = 406


def parse_content_range(value: str | None) -> int | None:
    """Total from a PostgREST Content-Range header ("0-19/57", "*/0"); None if unknown."""
    if not value or "/" not in value:
        return None
    total = value.rsplit("/", 1)[1].strip()
    if not total.isdigit():
        return None
    return int(total)


class SupabaseGateway(QueryGateway):
    def __init__(
        self,
        *,
        url: str,
        anon_key: str,
        access_token: str | None = None,
        table: str = TABLE,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.access_token = access_token
        self.table = table
        self.timeout = timeout
        self.transport = transport

    @property
    def table_url(self) -> str:
        return f"{self.url}/rest/v1/{self.table}"

    def for_session(self, access_token: str | None) -> "SupabaseGateway":
        return SupabaseGateway(
            url=self.url,
            anon_key=self.anon_key,
            access_token=access_token,
            table=self.table,
            timeout=self.timeout,
            transport=self.transport,
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.access_token or self.anon_key}",
        }

    async def _get(self, params: Params, headers: Dict[str, str]) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            return await client.get(self.table_url, params=list(params), headers=headers)

    async def _select(self, params: Params, *, counted: bool) -> QueryResult:
        headers = self._headers()
        if counted:
            headers["Prefer"] = "count=exact"

        try:
            resp = await self._get(params, headers)
            resp.raise_for_status()
            data = resp.json()
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array from {self.table}, got {type(data).__name__}")
            rows: List[IncidentRecord] = [IncidentRecord.model_validate(item) for item in data]
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("query on %s failed: %s", self.table, e)
            return QueryResult(error=str(e) or e.__class__.__name__)

        count = parse_content_range(resp.headers.get("content-range")) if counted else None
        return QueryResult(rows=rows, count=count)

    def _paged(self, page: int, limit: int) -> Params:
        offset = page_offset(page, limit)
        return [("order", "incident_date.desc"), ("offset", str(offset)), ("limit", str(limit))]

    async def recent_incidents(self, *, page: int, limit: int, since: datetime) -> QueryResult:
        params: list[Tuple[str, Any]] = [
            ("select", "*"),
            ("incident_date", f"gt.{to_iso_z(since)}"),
        ]
        params.extend(self._paged(page, limit))
        return await self._select(params, counted=True)

    async def incidents_by_date(self, *, day: date, page: int, limit: int) -> QueryResult:
        start, end = day_bounds(day)
        params: list[Tuple[str, Any]] = [
            ("select", "*"),
            ("incident_date", f"gte.{to_iso_z(start)}"),
            ("incident_date", f"lt.{to_iso_z(end)}"),
        ]
        params.extend(self._paged(page, limit))
        return await self._select(params, counted=True)

    async def incidents_by_number(self, incident_number: int) -> QueryResult:
        params = [
            ("select", "*"),
            ("incident_number", f"eq.{incident_number}"),
            ("order", "unit_id.asc"),
        ]
        return await self._select(params, counted=False)

    async def get_incident(self, incident_number: int, unit_id: str) -> RecordResult:
        params = [
            ("select", "*"),
            ("incident_number", f"eq.{incident_number}"),
            ("unit_id", f"eq.{unit_id}"),
        ]
        headers = self._headers()
        headers["Accept"] = "application/vnd.pgrst.object+json"

        try:
            resp = await self._get(params, headers)
            if resp.status_code == _NO_ROW_STATUS:
                return RecordResult(record=None)
            resp.raise_for_status()
            record = IncidentRecord.model_validate(resp.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("fetch of incident %s/%s failed: %s", incident_number, unit_id, e)
            return RecordResult(error=str(e) or e.__class__.__name__)

        return RecordResult(record=record)
