"""
Security helpers for password hashing and session authentication.

Passwords are hashed with bcrypt using ``settings.bcrypt_rounds`` as
the cost factor (10 by default).  Authentication is cookie based: the
Starlette ``SessionMiddleware`` signs a small cookie holding the
session identifier, and the identity behind it is resolved through the
``SessionService`` stored on ``app.state``.

FastAPI dependencies defined here:

* :func:`get_session_service` – the application's session service.
* :func:`get_current_session` – the caller's session, or ``None``.
* :func:`require_auth` – the caller's user id; raises ``AuthError``
  when there is no active session.
"""

import logging
from typing import Optional

import bcrypt
from fastapi import Depends, Request

from .config import settings
from .errors import AuthError
from .sessions import SessionData, SessionService


logger = logging.getLogger(__name__)

# Key under which the session identifier is kept in the signed cookie.
SESSION_ID_KEY = "sid"

# bcrypt only looks at the first 72 bytes of a password.
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt.

    Returns the modular crypt string (``$2b$10$...``), which embeds the
    salt and cost factor needed for verification.
    """
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Check a plain password against a stored bcrypt hash.

    Malformed or missing hashes never verify.
    """
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def get_session_service(request: Request) -> SessionService:
    """Dependency returning the session service created by ``create_app``."""
    return request.app.state.sessions


def start_session(request: Request, sessions: SessionService, user_id: int, user_name: str) -> None:
    """Bind the client to a new session, discarding any previous one."""
    sessions.destroy(request.session.get(SESSION_ID_KEY))
    request.session.clear()
    request.session[SESSION_ID_KEY] = sessions.create(user_id, user_name)


def end_session(request: Request, sessions: SessionService) -> None:
    """Destroy the client's session.  Safe to call without one."""
    sessions.destroy(request.session.get(SESSION_ID_KEY))
    request.session.clear()


def get_current_session(
    request: Request,
    sessions: SessionService = Depends(get_session_service),
) -> Optional[SessionData]:
    """Dependency returning the caller's session data, if any."""
    return sessions.get(request.session.get(SESSION_ID_KEY))


def require_auth(session: Optional[SessionData] = Depends(get_current_session)) -> int:
    """Dependency guarding protected routes.

    Returns the authenticated user's id.  Raises ``AuthError`` (401)
    when the request carries no active session.
    """
    if session is None:
        raise AuthError("Not authenticated")
    return session.user_id
