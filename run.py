"""Entry point for the Antologia API server.

Starts uvicorn serving ``antologia_api.app.main:app``.  Host and port
are taken from the ``HOST`` and ``PORT`` settings (``0.0.0.0`` and
``3000`` by default); put overrides in a ``.env`` file next to this
script when not running in production.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from antologia_api.app.core.config import settings
from antologia_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    # log_config=None keeps uvicorn from replacing the handlers set up by create_app.
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        log_config=None,
    )
    server = Server(config)
    logging.getLogger(__name__).info("Starting server on %s:%s", settings.host, settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
