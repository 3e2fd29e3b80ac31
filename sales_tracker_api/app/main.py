"""
Main entrypoint for the Sales Tracker API.

This module assembles the FastAPI application: logging, session and
CORS middleware, error handlers, the API router and the static
dashboard fallback.  ``create_app`` builds and configures the app,
which is then instantiated at module import time as ``app`` so it can
be served directly::

    uvicorn sales_tracker_api.app.main:app --reload
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .api.v1.router import router as api_router
from .core.config import project_path, settings
from .core.db import backend_name, init_db
from .core.errors import SalesTrackerError, ServerError
from .core.logging_config import setup_logging
from .core.sessions import InMemorySessionStore, SessionService, SessionStore


logger = logging.getLogger(__name__)


def _static_root() -> Path:
    return project_path(settings.static_dir)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(SalesTrackerError)
    async def handle_app_error(request: Request, exc: SalesTrackerError) -> JSONResponse:
        body = {"error": exc.message}
        if isinstance(exc, ServerError):
            logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.details)
            if exc.details:
                body["details"] = exc.details
        return JSONResponse(body, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse({"error": "Server error"}, status_code=500)


def create_app(session_store: Optional[SessionStore] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    session_store : Optional[SessionStore]
        Backend for server-side sessions.  Defaults to a fresh
        ``InMemorySessionStore``.

    Returns
    -------
    FastAPI
        A configured application instance.
    """
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.state.sessions = SessionService(
        session_store if session_store is not None else InMemorySessionStore(),
        settings.session_max_age,
    )

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        session_cookie=settings.session_cookie_name,
        max_age=settings.session_max_age,
        same_site="lax",
        https_only=settings.session_cookie_secure,
    )
    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_origin_regex=None if origins else ".*",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)

    @app.get("/")
    async def health() -> dict:
        return {"status": "Sales Tracker API running", "database": backend_name()}

    app.include_router(api_router, prefix="/api")

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the database file on first run and applies pending
        # migrations.
        init_db()
        logger.info("%s started with %s database", settings.project_name, backend_name())

    # Registered last so every API route takes precedence.
    @app.get("/{full_path:path}", include_in_schema=False)
    async def static_fallback(full_path: str):
        if full_path == "api" or full_path.startswith("api/"):
            return JSONResponse({"error": "Not found"}, status_code=404)
        root = _static_root()
        candidate = (root / full_path).resolve()
        if candidate.is_file() and root in candidate.parents:
            return FileResponse(candidate)
        index = root / "index.html"
        if index.is_file():
            return FileResponse(index)
        return JSONResponse({"error": "Not found"}, status_code=404)

    return app


# Create the application instance at import time so that uvicorn can
# discover it without calling create_app manually.
app = create_app()
