from __future__ import annotations

import logging

from app.records.auth.base import AuthClient
from app.records.auth.memory import MemoryAuth
from app.records.auth.supabase import SupabaseAuth
from app.records.config import ViewerConfig
from app.records.demo import demo_incidents
from app.records.gateway.base import QueryGateway
from app.records.gateway.memory import MemoryGateway
from app.records.gateway.supabase import SupabaseGateway

logger = logging.getLogger("ems_viewer.factory")


def get_gateway(cfg: ViewerConfig) -> QueryGateway:
    """
    Returns the query gateway for the configured backend.

    - backend=supabase: PostgREST over HTTP, bound per session to the user's token.
    - backend=memory: in-memory table seeded with demo incidents.
    """
    if cfg.backend == "supabase":
        return SupabaseGateway(url=cfg.supabase_url, anon_key=cfg.supabase_anon_key, timeout=cfg.timeout_seconds)

    gateway = MemoryGateway()
    gateway.load(demo_incidents())
    logger.info("using in-memory demo backend (%d incidents)", len(gateway.records))
    return gateway


def get_auth_client(cfg: ViewerConfig) -> AuthClient:
    if cfg.backend == "supabase":
        return SupabaseAuth(url=cfg.supabase_url, anon_key=cfg.supabase_anon_key, timeout=cfg.timeout_seconds)

    auth = MemoryAuth()
    auth.add_account(cfg.demo_email, cfg.demo_password)
    return auth
