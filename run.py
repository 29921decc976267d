"""Entry point that serves the Dog Tracker API with uvicorn.

Host, port and log level come from the ``HOST``, ``PORT`` and
``LOG_LEVEL`` environment variables (see ``core.config``).

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from dog_tracker_api.app.core.config import settings
from dog_tracker_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
