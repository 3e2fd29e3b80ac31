"""Entry point for running the Sales Tracker API.

Starts the FastAPI application under uvicorn.  It is intended to be
executed from the project root, e.g. on a PaaS where you only specify a
single Python file to run.

Configuration such as ``DATABASE_URL``, ``SECRET_KEY``, ``HOST`` and
``PORT`` is read from environment variables; see
``sales_tracker_api/app/core/config.py`` for the full list.

Usage:
    python run.py
"""
import logging

from uvicorn import Config, Server

from sales_tracker_api.app.core.config import settings
from sales_tracker_api.app.main import app


def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        log_config=None,
    )
    server = Server(config)
    logging.getLogger(__name__).info("Listening on %s:%s", settings.host, settings.port)
    server.run()


if __name__ == "__main__":
    try:
        main()
    except (KeyboardInterrupt, SystemExit):
        pass
