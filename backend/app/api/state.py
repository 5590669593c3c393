from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict
from uuid import uuid4

from app.records.auth.base import AuthClient
from app.records.config import ViewerConfig
from app.records.details import DetailsView
from app.records.factory import get_auth_client, get_gateway
from app.records.gateway.base import QueryGateway
from app.records.handoff import CrossSiteStorage, MemoryCrossSiteStorage, SessionHandoff
from app.records.listing.controller import ListController
from app.records.models import AuthUser

logger = logging.getLogger("ems_viewer.api.state")


@dataclass
class ViewSession:
    """Everything one browser's views hold between requests."""

    id: str
    access_token: str
    user: AuthUser
    incidents: ListController
    handoff: SessionHandoff
    details: DetailsView
    bridge: CrossSiteStorage | None = None


@dataclass
class SessionRegistry:
    config: ViewerConfig
    gateway: QueryGateway
    sessions: Dict[str, ViewSession] = field(default_factory=dict)

    def open(self, *, access_token: str, user: AuthUser) -> ViewSession:
        gateway = self.gateway.for_session(access_token)
        handoff = SessionHandoff()
        session = ViewSession(
            id=uuid4().hex,
            access_token=access_token,
            user=user,
            incidents=ListController(gateway, tz=self.config.display_zone),
            handoff=handoff,
            details=DetailsView(gateway, handoff),
            bridge=MemoryCrossSiteStorage() if self.config.bridge_enabled else None,
        )
        self.sessions[session.id] = session
        return session

    def get(self, session_id: str | None) -> ViewSession | None:
        if not session_id:
            return None
        return self.sessions.get(session_id)

    def close(self, session_id: str | None) -> None:
        if session_id:
            self.sessions.pop(session_id, None)


@dataclass
class AppState:
    config: ViewerConfig
    gateway: QueryGateway
    auth: AuthClient
    sessions: SessionRegistry


_state: AppState | None = None


def init_state(
    config: ViewerConfig,
    *,
    gateway: QueryGateway | None = None,
    auth: AuthClient | None = None,
) -> AppState:
    global _state
    gw = gateway or get_gateway(config)
    _state = AppState(
        config=config,
        gateway=gw,
        auth=auth or get_auth_client(config),
        sessions=SessionRegistry(config=config, gateway=gw),
    )
    logger.info("viewer state ready (backend=%s, bridge=%s)", config.backend, config.bridge)
    return _state


def get_state() -> AppState:
    if _state is None:
        return init_state(ViewerConfig.from_env())
    return _state
