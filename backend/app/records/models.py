from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.records.utils import parse_datetime, to_camel

PAGE_SIZE = 20
RECENT_WINDOW_DAYS = 7
ELLIPSIS = "…"

TABLE = "rip_and_runs"

# View names the browser pages live at; redirects point at these.
LOGIN_VIEW = "index.html"
LIST_VIEW = "incident-list.html"
DETAILS_VIEW = "incident-details.html"


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class IncidentRecord(CamelModel):
    incident_number: int
    unit_id: str
    incident_date: datetime | None = None
    location: str | None = None
    incident_type: str | None = None

    # Serialized JSON document (timeline + location detail). Kept as the raw
    # string so it can be handed to the extension bridge untouched.
    content: str | None = None

    @field_validator("incident_date", mode="before")
    @classmethod
    def _parse_incident_date(cls, value: Any) -> Any:
        if value is None or isinstance(value, datetime):
            return value
        parsed = parse_datetime(value)
        if parsed is None:
            raise ValueError(f"unparseable incident_date: {value!r}")
        return parsed

    @field_validator("content", mode="before")
    @classmethod
    def _serialize_content(cls, value: Any) -> Any:
        # jsonb columns come back decoded; the rest of the system wants a string.
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        return value

    @property
    def key(self) -> "IncidentKey":
        return IncidentKey(incident_number=self.incident_number, unit_id=self.unit_id)


class IncidentKey(CamelModel):
    incident_number: int
    unit_id: str


class FilterKind(str, Enum):
    none = "none"
    date = "date"
    incident = "incident"


@dataclass(frozen=True)
class FilterState:
    kind: FilterKind = FilterKind.none
    day: date | None = None
    incident_number: int | None = None

    @classmethod
    def by_date(cls, day: date) -> "FilterState":
        return cls(kind=FilterKind.date, day=day)

    @classmethod
    def by_incident_number(cls, incident_number: int) -> "FilterState":
        return cls(kind=FilterKind.incident, incident_number=incident_number)

    @property
    def paged(self) -> bool:
        return self.kind != FilterKind.incident


@dataclass(frozen=True)
class QueryResult:
    rows: list[IncidentRecord] = field(default_factory=list)
    count: int | None = None
    error: str | None = None


@dataclass(frozen=True)
class RecordResult:
    record: IncidentRecord | None = None
    error: str | None = None


# ---------------------------------------------------------------------------
# View payloads
# ---------------------------------------------------------------------------


PageMarker = Union[int, str]


class FilterView(CamelModel):
    kind: FilterKind = FilterKind.none
    date: str | None = None
    incident_number: int | None = None


class ListRow(CamelModel):
    incident_number: int
    unit_id: str
    date_time: str
    address: str
    incident_type: str


class PaginationView(CamelModel):
    current_page: int = 1
    total_pages: int = 0
    total_count: int = 0
    page_size: int = PAGE_SIZE
    page_numbers: list[PageMarker] = Field(default_factory=list)
    prev_enabled: bool = False
    next_enabled: bool = False
    info: str = "No results"


class ListView(CamelModel):
    filter: FilterView = Field(default_factory=FilterView)
    rows: list[ListRow] = Field(default_factory=list)
    pagination: PaginationView = Field(default_factory=PaginationView)
    error: str | None = None
    message: str | None = None


class TimelineStatus(str, Enum):
    ok = "ok"
    empty = "empty"
    error = "error"


class TimelineEntry(CamelModel):
    key: str
    status: str
    date: str
    time: str
    sort_key: datetime | None = None


class TimelineResult(CamelModel):
    status: TimelineStatus
    entries: list[TimelineEntry] = Field(default_factory=list)
    message: str | None = None


class IncidentDetails(CamelModel):
    incident_number: int
    unit_id: str
    address: str
    incident_type: str
    timeline: TimelineResult


class AuthUser(CamelModel):
    id: str
    email: str | None = None


class AuthSession(CamelModel):
    access_token: str
    refresh_token: str | None = None
    expires_in: int | None = None


class SignInResult(CamelModel):
    user: AuthUser | None = None
    session: AuthSession | None = None
    error: str | None = None


class Redirect(CamelModel):
    redirect: str
