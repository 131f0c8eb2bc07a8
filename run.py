"""Entry point for the Survey Portal API server.

Starts the FastAPI application with Uvicorn on ``HOST``/``PORT``
(defaults ``0.0.0.0`` and ``3000``).  Configuration is read from
environment variables; see ``survey_portal_api.app.core.config``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from survey_portal_api.app.core.config import settings
from survey_portal_api.app.main import app

logger = logging.getLogger(__name__)


async def serve() -> None:
    """Run the API until interrupted."""
    # Logging is already set up by create_app; keep uvicorn from replacing it.
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_config=None)
    server = Server(config)
    logger.info("Server listening on http://localhost:%s", settings.port)
    await server.serve()


def main() -> None:
    try:
        asyncio.run(serve())
    except (KeyboardInterrupt, SystemExit):
        pass


if __name__ == "__main__":
    main()
