"""
Incident list state machine.

Every user interaction on the list view is an action fed to `reduce`, which
returns the next state and, when the table has to be (re)loaded, a
`FetchPage` effect. `reduce` never performs I/O; the controller runs effects
against a gateway and feeds the outcome back as `PageLoaded`.

Each effect carries a token taken from a per-state counter. Only the
completion that matches the most recently issued token is applied, so a slow
fetch started by an earlier click cannot overwrite a newer one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Tuple, Union

from app.records.errors import InvalidFilter
from app.records.models import PAGE_SIZE, FilterKind, FilterState, IncidentRecord, QueryResult
from app.records.listing.pagination import clamp_page
from app.records.utils import total_pages

logger = logging.getLogger("ems_viewer.listing.state")


@dataclass(frozen=True)
class ListState:
    filter: FilterState = FilterState()
    current_page: int = 1
    total_count: int = 0
    rows: Tuple[IncidentRecord, ...] = ()
    error: str | None = None
    loading: bool = False
    request_seq: int = 0

    @property
    def loaded(self) -> bool:
        return self.request_seq > 0


@dataclass(frozen=True)
class ApplyFilter:
    incident_number: str = ""
    date: str = ""


@dataclass(frozen=True)
class ClearFilter:
    pass


@dataclass(frozen=True)
class NextPage:
    pass


@dataclass(frozen=True)
class PrevPage:
    pass


@dataclass(frozen=True)
class GoToPage:
    page: int


@dataclass(frozen=True)
class Refresh:
    pass


@dataclass(frozen=True)
class PageLoaded:
    token: int
    result: QueryResult


Action = Union[ApplyFilter, ClearFilter, NextPage, PrevPage, GoToPage, Refresh, PageLoaded]


@dataclass(frozen=True)
class FetchPage:
    token: int
    filter: FilterState
    page: int
    page_size: int


Effect = Union[FetchPage, None]


def parse_filter(incident_number: str, day: str) -> FilterState:
    """
    Turn the two raw search inputs into a filter.

    A non-blank incident number wins over a date; both blank means no filter.
    """
    number = (incident_number or "").strip()
    if number:
        try:
            return FilterState.by_incident_number(int(number))
        except ValueError:
            raise InvalidFilter(f"Incident number must be a whole number, got {number!r}.")

    raw_day = (day or "").strip()
    if raw_day:
        try:
            return FilterState.by_date(date.fromisoformat(raw_day))
        except ValueError:
            raise InvalidFilter(f"Date must be YYYY-MM-DD, got {raw_day!r}.")

    return FilterState()


def _fetch(state: ListState, page_size: int, **changes) -> Tuple[ListState, Effect]:
    token = state.request_seq + 1
    nxt = replace(state, request_seq=token, loading=True, **changes)
    return nxt, FetchPage(token=token, filter=nxt.filter, page=nxt.current_page, page_size=page_size)


def _loaded(state: ListState, action: PageLoaded, page_size: int) -> Tuple[ListState, Effect]:
    if action.token != state.request_seq:
        logger.debug("dropping stale page result token=%s latest=%s", action.token, state.request_seq)
        return state, None

    result = action.result
    if result.error:
        # Table body shows the error; filter/page/count are left as they were.
        return replace(state, rows=(), error=result.error, loading=False), None

    rows = tuple(result.rows)
    if not state.filter.paged:
        return replace(state, rows=rows, total_count=len(rows), current_page=1, error=None, loading=False), None

    count = result.count or 0
    nxt = replace(state, rows=rows, total_count=count, error=None, loading=False)
    clamped = clamp_page(nxt.current_page, count, page_size)
    if clamped != nxt.current_page:
        # The result set shrank under us; show the last page that still exists.
        return _fetch(nxt, page_size, current_page=clamped)
    return nxt, None


def reduce(state: ListState, action: Action, *, page_size: int = PAGE_SIZE) -> Tuple[ListState, Effect]:
    if isinstance(action, PageLoaded):
        return _loaded(state, action, page_size)

    if isinstance(action, ApplyFilter):
        return _fetch(state, page_size, filter=parse_filter(action.incident_number, action.date), current_page=1)

    if isinstance(action, ClearFilter):
        return _fetch(state, page_size, filter=FilterState(), current_page=1)

    if isinstance(action, Refresh):
        return _fetch(state, page_size)

    # Paging actions; incident-number results are a single unpaged set.
    if state.filter.kind == FilterKind.incident:
        return state, None

    pages = total_pages(state.total_count, page_size)

    if isinstance(action, NextPage):
        if state.current_page < pages:
            return _fetch(state, page_size, current_page=state.current_page + 1)
        return state, None

    if isinstance(action, PrevPage):
        if state.current_page > 1:
            return _fetch(state, page_size, current_page=state.current_page - 1)
        return state, None

    if isinstance(action, GoToPage):
        return _fetch(state, page_size, current_page=clamp_page(action.page, state.total_count, page_size))

    raise TypeError(f"unknown list action: {action!r}")
