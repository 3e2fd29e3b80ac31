"""
Application package.

Sub-packages follow the usual layering: ``core`` (configuration,
database, sessions, security, errors), ``schemas`` (pydantic request
and response models), ``services`` (business logic and SQL) and
``api`` (FastAPI routers).
"""

from .main import app  # noqa: F401
