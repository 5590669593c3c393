from fastapi import APIRouter

from app.api.routes import auth, bridge, details, incidents

api_router = APIRouter()

api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(incidents.router, tags=["incidents"])
api_router.include_router(details.router, tags=["details"])
api_router.include_router(bridge.router, tags=["bridge"])
