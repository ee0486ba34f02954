"""Entry point for the Lesson Booking API.

Starts the FastAPI application under Uvicorn.  Host and port are read
from the ``HOST`` and ``PORT`` environment variables (defaults
``0.0.0.0`` and ``3000``); database connection details come from the
properties file named by ``DB_PROPERTIES`` (``conf/db.properties`` by
default).

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from lesson_booking_api.app.core.config import settings
from lesson_booking_api.app.main import app


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
