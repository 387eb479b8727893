"""Entry point for the Blog Catalog API server.

Starts the FastAPI application with Uvicorn.  Host, port and log level
come from the application settings (``HOST``, ``PORT`` and
``LOG_LEVEL`` environment variables; defaults ``0.0.0.0``, ``3003`` and
``INFO``).

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from blog_catalog_api.app.core.config import settings
from blog_catalog_api.app.main import app


async def run_api() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        # Keep the handlers installed by ``setup_logging``.
        log_config=None,
    )
    server = Server(config)
    logging.getLogger(__name__).info("Server running on port %s", settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        pass
