from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from pathlib import Path
from typing import Tuple

from app.records.utils import resolve_zone

logger = logging.getLogger("ems_viewer.config")

DEFAULT_HANDOFF_URL = "https://newjersey.imagetrendelite.com/Elite/Organizationnewjersey/"
DEFAULT_CORS_ORIGINS = "http://localhost:8000,http://127.0.0.1:8000,http://localhost:3000"

# Values shipped in the sample config; treated as "not configured".
_PLACEHOLDERS = {"YOUR_SUPABASE_URL_HERE", "YOUR_SUPABASE_ANON_KEY_HERE"}


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _configured(value: str) -> bool:
    return bool(value) and value not in _PLACEHOLDERS


def _env_zone(name: str, default: str = "UTC") -> str:
    raw = os.getenv(name, default).strip() or default
    if resolve_zone(raw) is None:
        logger.warning("unknown time zone %s=%r, using %s", name, raw, default)
        return default
    return raw


@dataclass(frozen=True)
class ViewerConfig:
    backend: str = "memory"  # "supabase" | "memory"
    supabase_url: str = ""
    supabase_anon_key: str = ""
    timeout_seconds: float = 10.0

    display_timezone: str = "UTC"
    handoff_url: str = DEFAULT_HANDOFF_URL
    bridge: str = "memory"  # "memory" | "off"

    demo_email: str = "demo@example.org"
    demo_password: str = "demo"

    cors_origins: Tuple[str, ...] = field(default_factory=lambda: tuple(DEFAULT_CORS_ORIGINS.split(",")))
    session_cookie: str = "ems_viewer_session"
    cookie_secure: bool = False
    log_level: str = "INFO"
    static_dir: str | None = None

    @property
    def bridge_enabled(self) -> bool:
        return self.bridge == "memory"

    @property
    def display_zone(self) -> tzinfo:
        return resolve_zone(self.display_timezone) or timezone.utc

    @classmethod
    def from_env(cls) -> "ViewerConfig":
        """
        Build the config from the process environment.

        EMS_VIEWER_BACKEND=auto (the default) picks Supabase when both
        SUPABASE_URL and SUPABASE_ANON_KEY are set to real values, else the
        in-memory demo backend.
        """
        url = os.getenv("SUPABASE_URL", "").strip().rstrip("/")
        key = os.getenv("SUPABASE_ANON_KEY", "").strip()

        backend = (os.getenv("EMS_VIEWER_BACKEND") or "auto").strip().lower()
        if backend not in ("supabase", "memory"):
            backend = "supabase" if _configured(url) and _configured(key) else "memory"

        bridge = (os.getenv("EMS_VIEWER_BRIDGE") or "memory").strip().lower()
        if bridge not in ("memory", "off"):
            bridge = "memory"

        origins = os.getenv("EMS_VIEWER_CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",")
        static_dir = os.getenv("EMS_VIEWER_STATIC_DIR") or str(Path(__file__).resolve().parents[2] / "static")

        return cls(
            backend=backend,
            supabase_url=url,
            supabase_anon_key=key,
            timeout_seconds=_env_float("EMS_VIEWER_TIMEOUT_SECONDS", 10.0),
            display_timezone=_env_zone("EMS_VIEWER_DISPLAY_TZ"),
            handoff_url=os.getenv("EMS_VIEWER_HANDOFF_URL", DEFAULT_HANDOFF_URL).strip() or DEFAULT_HANDOFF_URL,
            bridge=bridge,
            demo_email=os.getenv("EMS_VIEWER_DEMO_EMAIL", "demo@example.org"),
            demo_password=os.getenv("EMS_VIEWER_DEMO_PASSWORD", "demo"),
            cors_origins=tuple(o.strip() for o in origins if o.strip()),
            cookie_secure=_env_flag("EMS_VIEWER_COOKIE_SECURE"),
            log_level=os.getenv("EMS_VIEWER_LOG_LEVEL", "INFO").strip().upper() or "INFO",
            static_dir=static_dir,
        )
