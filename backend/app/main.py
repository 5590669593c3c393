import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.router import api_router
from app.api.state import init_state
from app.records.auth.base import AuthClient
from app.records.config import ViewerConfig
from app.records.gateway.base import QueryGateway


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_app(
    config: ViewerConfig | None = None,
    *,
    gateway: QueryGateway | None = None,
    auth: AuthClient | None = None,
) -> FastAPI:
    if config is None:
        # .env files are a dev convenience; the real environment wins.
        here = Path(__file__).resolve()
        backend_dir = here.parents[1]  # backend/
        repo_root = here.parents[2]  # repo root
        load_dotenv(repo_root / ".env", override=False)
        load_dotenv(backend_dir / ".env", override=False)
        config = ViewerConfig.from_env()

    configure_logging(config.log_level)
    init_state(config, gateway=gateway, auth=auth)

    app = FastAPI(
        title="EMS Incident Viewer API",
        version="0.1.0",
        description="Browse rip-and-run incident records, inspect timelines, and hand an incident to the records site.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api")

    @app.get("/healthz")
    def healthz() -> dict:
        return {"ok": True, "backend": config.backend}

    # Serve the browser pages when they are deployed next to the API.
    if config.static_dir and Path(config.static_dir).is_dir():
        app.mount("/", StaticFiles(directory=config.static_dir, html=True), name="static")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "0") == "1",
    )
