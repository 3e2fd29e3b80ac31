"""
Authentication endpoints.

Register, log in, log out and report the current identity.  A
successful register or login binds the client to a fresh server-side
session whose identifier travels in the signed session cookie.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request

from sales_tracker_api.app.core.security import (
    SESSION_ID_KEY,
    end_session,
    get_current_session,
    get_session_service,
    start_session,
)
from sales_tracker_api.app.core.sessions import SessionData, SessionService
from sales_tracker_api.app.schemas.user import SessionUser, UserLogin, UserRegister
from sales_tracker_api.app.services.user_service import UserService


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register")
async def register(
    request: Request,
    data: Optional[UserRegister] = None,
    sessions: SessionService = Depends(get_session_service),
) -> dict:
    """Create an account and log it in.

    Returns 400 when a field is missing or the email is already
    registered.
    """
    user = await UserService.register(data or UserRegister())
    start_session(request, sessions, user.id, user.name)
    return {"success": True, "user": user.model_dump()}


@router.post("/login")
async def login(
    request: Request,
    data: Optional[UserLogin] = None,
    sessions: SessionService = Depends(get_session_service),
) -> dict:
    """Verify credentials and start a session.

    Unknown emails and wrong passwords give the same 400 response.
    """
    data = data or UserLogin()
    user = await UserService.authenticate(data.email, data.password)
    start_session(request, sessions, user.id, user.name)
    return {"success": True, "user": user.model_dump()}


@router.post("/logout")
async def logout(
    request: Request,
    sessions: SessionService = Depends(get_session_service),
) -> dict:
    session = sessions.get(request.session.get(SESSION_ID_KEY))
    end_session(request, sessions)
    if session is not None:
        logger.info("User %s logged out", session.user_id)
    return {"success": True}


@router.get("/me")
async def me(session: Optional[SessionData] = Depends(get_current_session)) -> dict:
    """Return the session's user, or ``null`` when not logged in."""
    if session is None:
        return {"user": None}
    return {"user": SessionUser(id=session.user_id, name=session.user_name).model_dump()}
