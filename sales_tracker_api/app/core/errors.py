"""
Application exception hierarchy.

Services raise these exceptions; ``main.create_app`` registers
handlers that turn them into JSON error responses.  Client errors
carry the HTTP status they map to; everything else is a server error
and is answered with a generic 500 body.
"""

from typing import Optional


class SalesTrackerError(Exception):
    """Base class for all errors raised by the service layer."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ClientError(SalesTrackerError):
    """The request cannot be served as sent (4xx)."""

    status_code = 400


class ValidationError(ClientError):
    """A required field is missing or the payload has the wrong shape."""


class ConflictError(ClientError):
    """The resource already exists (e.g. a registered email)."""


class AuthError(ClientError):
    """No active session for a protected operation."""

    status_code = 401


class InvalidCredentialsError(AuthError):
    """Login failed.  Reported as 400 to match the login contract."""

    status_code = 400

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class NotFoundError(ClientError):
    """The resource does not exist or is not owned by the caller."""

    status_code = 404


class ServerError(SalesTrackerError):
    """Persistence failure or another condition the client cannot fix."""

    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.details = details
