"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API can be started locally without any configuration; in a
production deployment you should at least override ``SECRET_KEY``
and ``DATABASE_URL``.
"""

import os
from dataclasses import dataclass
from pathlib import Path

# Repository root; relative paths in settings are resolved against it.
PROJECT_ROOT = Path(__file__).resolve().parents[3]


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Sales Tracker API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Used to sign the session cookie.  Rotating it logs every client out.
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "sales_tracker_session")
    session_max_age_days: int = int(os.getenv("SESSION_MAX_AGE_DAYS", "7"))
    # Off by default so the API works over plain HTTP in development.
    session_cookie_secure: bool = _env_flag("SESSION_COOKIE_SECURE")

    # bcrypt work factor for new password hashes.
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "10"))

    # Either a SQLite file path or a ``postgres://`` / ``postgresql://``
    # connection string for a hosted database.  Relative SQLite paths
    # are resolved against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "sales_tracker.db")

    # Directory served by the catch-all GET route (built dashboard).
    static_dir: str = os.getenv("STATIC_DIR", "public")

    # Where Google Form submissions are written: ``form_submissions``
    # keeps the raw answers, ``entries`` maps them onto the entries
    # table under a shared webhook user.
    webhook_target: str = os.getenv("WEBHOOK_TARGET", "form_submissions")
    webhook_user_email: str = os.getenv("WEBHOOK_USER_EMAIL", "webhook@sales-tracker.local")
    webhook_user_name: str = os.getenv("WEBHOOK_USER_NAME", "Google Form")

    # Comma-separated list of allowed origins.  Empty means any origin
    # is reflected back, with credentials allowed.
    cors_origins: str = os.getenv("CORS_ORIGINS", "")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    @property
    def session_max_age(self) -> int:
        """Session lifetime in seconds."""
        return self.session_max_age_days * 24 * 60 * 60


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# must therefore be set before importing this module.
settings = Settings()


def project_path(value: str) -> Path:
    """Resolve a configured path, anchoring relative ones at ``PROJECT_ROOT``."""
    path = Path(value)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path.resolve()
