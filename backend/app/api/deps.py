from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from app.api.state import AppState, ViewSession, get_state
from app.records.errors import AuthRequired, ViewerError


def error_detail(err: ViewerError, *, redirect: str | None = None) -> dict:
    return {"message": err.message, "redirect": redirect or err.redirect}


def session_id(request: Request, state: AppState = Depends(get_state)) -> str | None:
    return request.cookies.get(state.config.session_cookie)


async def require_session(
    sid: str | None = Depends(session_id),
    state: AppState = Depends(get_state),
) -> ViewSession:
    """
    The caller's view session, with a still-valid user.

    Anything else is AuthRequired: the page goes back to the login view.
    """
    session = state.sessions.get(sid)
    if session is None:
        raise HTTPException(status_code=401, detail=error_detail(AuthRequired()))

    user = await state.auth.get_user(session.access_token)
    if user is None:
        state.sessions.close(session.id)
        raise HTTPException(status_code=401, detail=error_detail(AuthRequired()))

    session.user = user
    return session
