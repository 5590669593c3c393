from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Callable

from app.records.gateway.base import QueryGateway
from app.records.listing.render import build_list_view
from app.records.listing.state import Action, FetchPage, ListState, PageLoaded, reduce
from app.records.models import PAGE_SIZE, RECENT_WINDOW_DAYS, FilterKind, ListView, QueryResult
from app.records.utils import now_utc

logger = logging.getLogger("ems_viewer.listing.controller")


class ListController:
    """
    Owns one list view's state and runs its fetch effects.

    Dispatches may overlap (two clicks while a query is in flight); the state
    machine's request tokens make the latest dispatch win.
    """

    def __init__(
        self,
        gateway: QueryGateway,
        *,
        page_size: int = PAGE_SIZE,
        tz: tzinfo = timezone.utc,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self.gateway = gateway
        self.page_size = page_size
        self.tz = tz
        self.clock = clock
        self.state = ListState()

    async def dispatch(self, action: Action) -> ListState:
        self.state, effect = reduce(self.state, action, page_size=self.page_size)
        while effect is not None:
            result = await self.run(effect)
            self.state, effect = reduce(self.state, PageLoaded(token=effect.token, result=result), page_size=self.page_size)
        return self.state

    async def run(self, effect: FetchPage) -> QueryResult:
        """Run one fetch. Failures come back as an error result, never as an exception."""
        try:
            return await self._query(effect)
        except Exception as e:
            logger.exception("fetch token=%s failed", effect.token)
            return QueryResult(error=str(e) or e.__class__.__name__)

    async def _query(self, effect: FetchPage) -> QueryResult:
        f = effect.filter
        logger.debug("fetch token=%s filter=%s page=%s", effect.token, f.kind.value, effect.page)

        if f.kind == FilterKind.incident and f.incident_number is not None:
            return await self.gateway.incidents_by_number(f.incident_number)
        if f.kind == FilterKind.date and f.day is not None:
            return await self.gateway.incidents_by_date(day=f.day, page=effect.page, limit=effect.page_size)

        since = self.clock() - timedelta(days=RECENT_WINDOW_DAYS)
        return await self.gateway.recent_incidents(page=effect.page, limit=effect.page_size, since=since)

    def view(self) -> ListView:
        return build_list_view(self.state, tz=self.tz, page_size=self.page_size)
