from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import error_detail, require_session
from app.api.state import ViewSession
from app.records.errors import IntegrationUnavailable
from app.records.handoff import CrossSiteStorage
from app.records.models import CamelModel

router = APIRouter()


class BridgeValue(CamelModel):
    key: str
    value: str | None = None


def _storage(session: ViewSession) -> CrossSiteStorage:
    if session.bridge is None:
        raise HTTPException(status_code=503, detail=error_detail(IntegrationUnavailable()))
    return session.bridge


@router.get("/bridge/{key}", response_model=BridgeValue)
def read_bridge_value(key: str, session: ViewSession = Depends(require_session)) -> BridgeValue:
    """What the extension side sees under `key` (null when nothing is saved)."""
    return BridgeValue(key=key, value=_storage(session).get(key))


@router.delete("/bridge/{key}", response_model=BridgeValue)
def clear_bridge_value(key: str, session: ViewSession = Depends(require_session)) -> BridgeValue:
    _storage(session).set(key, None)
    return BridgeValue(key=key)
