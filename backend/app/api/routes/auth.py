from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from app.api.deps import session_id
from app.api.state import AppState, get_state
from app.records.models import LIST_VIEW, LOGIN_VIEW, AuthUser, CamelModel

router = APIRouter()
logger = logging.getLogger("ems_viewer.api.auth")


class LoginRequest(CamelModel):
    email: str = ""
    password: str = ""


class LoginResponse(CamelModel):
    user: AuthUser
    redirect: str = LIST_VIEW


class SessionStatus(CamelModel):
    authenticated: bool
    user: AuthUser | None = None
    redirect: str | None = None


@router.get("/auth/session", response_model=SessionStatus)
async def current_session(
    sid: str | None = Depends(session_id),
    state: AppState = Depends(get_state),
) -> SessionStatus:
    """Login-page probe: an authenticated browser is sent on to the incident list."""
    session = state.sessions.get(sid)
    user = await state.auth.get_user(session.access_token) if session else None
    if user is None:
        return SessionStatus(authenticated=False)
    return SessionStatus(authenticated=True, user=user, redirect=LIST_VIEW)


@router.post("/auth/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    response: Response,
    sid: str | None = Depends(session_id),
    state: AppState = Depends(get_state),
) -> LoginResponse:
    email = body.email.strip()
    if not email or not body.password:
        raise HTTPException(status_code=400, detail={"message": "Please enter both email and password."})

    result = await state.auth.sign_in(email, body.password)
    if result.error:
        logger.info("sign-in rejected for %s", email)
        raise HTTPException(status_code=401, detail={"message": result.error})
    if result.user is None or result.session is None:
        raise HTTPException(status_code=401, detail={"message": "Login failed. Please try again."})

    # Signing in again from the same browser replaces its previous session.
    previous = state.sessions.get(sid)
    if previous is not None:
        error = await state.auth.sign_out(previous.access_token)
        if error:
            logger.warning("sign-out of replaced session reported: %s", error)
        state.sessions.close(previous.id)

    session = state.sessions.open(access_token=result.session.access_token, user=result.user)
    response.set_cookie(
        state.config.session_cookie,
        session.id,
        httponly=True,
        samesite="lax",
        secure=state.config.cookie_secure,
    )
    logger.info("signed in %s", result.user.email or result.user.id)
    return LoginResponse(user=result.user)


@router.post("/auth/logout")
async def logout(
    response: Response,
    sid: str | None = Depends(session_id),
    state: AppState = Depends(get_state),
) -> dict:
    session = state.sessions.get(sid)
    if session:
        error = await state.auth.sign_out(session.access_token)
        if error:
            logger.warning("sign-out reported: %s", error)
        state.sessions.close(session.id)
    response.delete_cookie(state.config.session_cookie)
    return {"redirect": LOGIN_VIEW}
