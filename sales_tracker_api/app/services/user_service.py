"""
Business logic for users and authentication.

``UserService`` registers users, verifies credentials and manages the
shared account that owns entries created through the Google Form
webhook.  Session handling is left to the endpoints, which own the
request; the service only deals with persisted users.
"""

import logging
import secrets
from typing import Optional

from sqlalchemy import text

from ..core.config import settings
from ..core.db import IntegrityError, get_engine
from ..core.errors import ConflictError, InvalidCredentialsError, ValidationError
from ..core.security import hash_password, verify_password
from ..schemas.user import UserRead, UserRegister


logger = logging.getLogger(__name__)

_INSERT_USER = text(
    "INSERT INTO users (email, password, name) VALUES (:email, :password, :name) RETURNING id"
)
_USER_ID_BY_EMAIL = text("SELECT id FROM users WHERE email = :email")


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


class UserService:
    """Service for registering and authenticating users."""

    @classmethod
    async def register(cls, data: UserRegister) -> UserRead:
        """Create a user with a bcrypt-hashed password.

        Raises ``ValidationError`` when email, password or name is
        missing and ``ConflictError`` when the email is taken.
        """
        email = _clean(data.email).lower()
        name = _clean(data.name)
        password = data.password or ""
        if not email or not password or not name:
            raise ValidationError("Email, password, and name are required")

        hashed = hash_password(password)
        try:
            with get_engine().begin() as conn:
                if conn.execute(_USER_ID_BY_EMAIL, {"email": email}).first():
                    raise ConflictError("Email already registered")
                user_id = conn.execute(
                    _INSERT_USER, {"email": email, "password": hashed, "name": name}
                ).scalar_one()
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email
            raise ConflictError("Email already registered") from e

        logger.info("Registered user %s (id=%s)", email, user_id)
        return UserRead(id=user_id, name=name, email=email)

    @classmethod
    async def authenticate(cls, email: Optional[str], password: Optional[str]) -> UserRead:
        """Return the user matching the credentials.

        Unknown emails and wrong passwords both raise
        ``InvalidCredentialsError`` with the same message.
        """
        email = _clean(email).lower()
        if not email or not password:
            raise InvalidCredentialsError()
        with get_engine().begin() as conn:
            row = conn.execute(
                text("SELECT id, email, name, password FROM users WHERE email = :email"),
                {"email": email},
            ).mappings().first()
        if not row or not verify_password(password, row["password"]):
            logger.info("Failed login for %s", email)
            raise InvalidCredentialsError()
        logger.info("User %s logged in", row["id"])
        return UserRead(id=row["id"], name=row["name"], email=row["email"])

    @classmethod
    async def get_or_create_webhook_user(cls) -> int:
        """Return the id of the account owning webhook-created entries.

        The account is created on first use with a random password,
        so nobody can log in as it.
        """
        email = settings.webhook_user_email.lower()
        with get_engine().begin() as conn:
            user_id = conn.execute(_USER_ID_BY_EMAIL, {"email": email}).scalar()
        if user_id is not None:
            return user_id
        params = {
            "email": email,
            "password": hash_password(secrets.token_urlsafe(32)),
            "name": settings.webhook_user_name,
        }
        try:
            with get_engine().begin() as conn:
                user_id = conn.execute(_INSERT_USER, params).scalar_one()
        except IntegrityError:
            with get_engine().begin() as conn:
                return conn.execute(_USER_ID_BY_EMAIL, {"email": email}).scalar_one()
        logger.info("Created default webhook user %s (id=%s)", email, user_id)
        return user_id

    @classmethod
    async def reset_password(cls, email: str, password: str) -> bool:
        """Store a new password hash for ``email``.

        Returns ``False`` when no such user exists.
        """
        if not password:
            raise ValidationError("Password must not be empty")
        with get_engine().begin() as conn:
            updated = conn.execute(
                text("UPDATE users SET password = :password WHERE email = :email"),
                {"password": hash_password(password), "email": _clean(email).lower()},
            ).rowcount
        if updated:
            logger.info("Password reset for %s", email)
        return bool(updated)
