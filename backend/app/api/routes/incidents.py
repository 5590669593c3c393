from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Path

from app.api.deps import error_detail, require_session
from app.api.state import ViewSession
from app.records.errors import InvalidFilter
from app.records.listing.state import Action, ApplyFilter, ClearFilter, GoToPage, NextPage, PrevPage, Refresh
from app.records.models import DETAILS_VIEW, CamelModel, IncidentKey, ListView, Redirect

router = APIRouter()


class SearchRequest(CamelModel):
    incident_number: str = ""
    date: str = ""


async def _dispatch(session: ViewSession, action: Action) -> ListView:
    try:
        await session.incidents.dispatch(action)
    except InvalidFilter as e:
        raise HTTPException(status_code=400, detail=error_detail(e))
    return session.incidents.view()


@router.get("/incidents", response_model=ListView)
async def list_incidents(session: ViewSession = Depends(require_session)) -> ListView:
    # First visit loads the default window (past 7 days).
    if not session.incidents.state.loaded:
        return await _dispatch(session, Refresh())
    return session.incidents.view()


@router.post("/incidents/search", response_model=ListView)
async def search_incidents(body: SearchRequest, session: ViewSession = Depends(require_session)) -> ListView:
    return await _dispatch(session, ApplyFilter(incident_number=body.incident_number, date=body.date))


@router.post("/incidents/clear", response_model=ListView)
async def clear_filter(session: ViewSession = Depends(require_session)) -> ListView:
    return await _dispatch(session, ClearFilter())


@router.post("/incidents/refresh", response_model=ListView)
async def refresh_incidents(session: ViewSession = Depends(require_session)) -> ListView:
    return await _dispatch(session, Refresh())


@router.post("/incidents/next", response_model=ListView)
async def next_page(session: ViewSession = Depends(require_session)) -> ListView:
    return await _dispatch(session, NextPage())


@router.post("/incidents/prev", response_model=ListView)
async def prev_page(session: ViewSession = Depends(require_session)) -> ListView:
    return await _dispatch(session, PrevPage())


@router.post("/incidents/page/{page}", response_model=ListView)
async def go_to_page(
    page: int = Path(..., ge=1),
    session: ViewSession = Depends(require_session),
) -> ListView:
    return await _dispatch(session, GoToPage(page=page))


@router.post("/incidents/select", response_model=Redirect)
async def select_incident(body: IncidentKey, session: ViewSession = Depends(require_session)) -> Redirect:
    """Remember the clicked row for the details view."""
    session.handoff.write_selection(body)
    return Redirect(redirect=DETAILS_VIEW)
