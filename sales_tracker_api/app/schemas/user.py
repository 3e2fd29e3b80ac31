"""
Pydantic models for user data.

Registration and login payloads keep every field optional so that
missing values reach the service layer, which reports them with the
API's own error body instead of FastAPI's 422 validation response.
Password hashes never leave the service layer.
"""

from typing import Optional

from pydantic import BaseModel, Field


class UserRegister(BaseModel):
    """Body of ``POST /api/register``."""

    email: Optional[str] = Field(None, description="Login email, unique per user")
    password: Optional[str] = Field(None, description="Plain text password, hashed before storage")
    name: Optional[str] = Field(None, description="Display name")


class UserLogin(BaseModel):
    """Body of ``POST /api/login``."""

    email: Optional[str] = None
    password: Optional[str] = None


class UserRead(BaseModel):
    """User summary returned after register and login."""

    id: int
    name: str
    email: str


class SessionUser(BaseModel):
    """Identity held in the session, returned by ``GET /api/me``."""

    id: int
    name: str
