from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import error_detail, require_session
from app.api.state import AppState, ViewSession, get_state
from app.records.errors import GatewayError, IncidentNotFound, IntegrationUnavailable, MissingSelection, NoIncidentLoaded
from app.records.models import LIST_VIEW, IncidentDetails, Redirect

router = APIRouter()


@router.get("/details", response_model=IncidentDetails)
async def incident_details(session: ViewSession = Depends(require_session)) -> IncidentDetails:
    try:
        return await session.details.load()
    except MissingSelection as e:
        raise HTTPException(status_code=409, detail=error_detail(e))
    except IncidentNotFound as e:
        raise HTTPException(status_code=404, detail=error_detail(e))
    except GatewayError as e:
        raise HTTPException(status_code=502, detail=error_detail(e, redirect=LIST_VIEW))


@router.post("/details/select", response_model=Redirect)
def select_for_handoff(
    session: ViewSession = Depends(require_session),
    state: AppState = Depends(get_state),
) -> Redirect:
    """
    Hand the loaded incident's content JSON to the extension bridge, then send
    the browser on to the records site.

    Nothing is written when the bridge is unavailable.
    """
    try:
        session.details.select(session.bridge)
    except NoIncidentLoaded as e:
        raise HTTPException(status_code=409, detail=error_detail(e))
    except IntegrationUnavailable as e:
        raise HTTPException(status_code=503, detail=error_detail(e))
    return Redirect(redirect=state.config.handoff_url)
