from __future__ import annotations

from datetime import timezone, tzinfo
from typing import Iterable, List

from app.records.listing.pagination import build_pagination
from app.records.listing.state import ListState
from app.records.models import PAGE_SIZE, FilterState, FilterView, IncidentRecord, ListRow, ListView, PaginationView
from app.records.utils import format_display_datetime

NO_INCIDENTS_MESSAGE = "No incidents found."
LOADING_MESSAGE = "Loading incidents..."
LOAD_FAILED_MESSAGE = "Failed to load incidents. Please try again."


def render_row(record: IncidentRecord, *, tz: tzinfo = timezone.utc) -> ListRow:
    return ListRow(
        incident_number=record.incident_number,
        unit_id=record.unit_id,
        date_time=format_display_datetime(record.incident_date, tz),
        address=record.location or "N/A",
        incident_type=record.incident_type or "N/A",
    )


def render_rows(records: Iterable[IncidentRecord], *, tz: tzinfo = timezone.utc) -> List[ListRow]:
    return [render_row(r, tz=tz) for r in records]


def render_filter(f: FilterState) -> FilterView:
    return FilterView(
        kind=f.kind,
        date=f.day.isoformat() if f.day else None,
        incident_number=f.incident_number,
    )


def build_list_view(state: ListState, *, tz: tzinfo = timezone.utc, page_size: int = PAGE_SIZE) -> ListView:
    view = ListView(
        filter=render_filter(state.filter),
        pagination=build_pagination(state.current_page, state.total_count, page_size, paged=state.filter.paged),
    )
    if state.loading:
        view.message = LOADING_MESSAGE
        view.pagination.info = "Loading..."
        return view
    if state.error:
        view.error = state.error
        view.message = LOAD_FAILED_MESSAGE
        # The previous count no longer describes what is on screen.
        view.pagination = PaginationView(page_size=page_size)
        return view

    view.rows = render_rows(state.rows, tz=tz)
    if not view.rows:
        view.message = NO_INCIDENTS_MESSAGE
    return view
