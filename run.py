"""Entry point for the Estoque API.

Starts the FastAPI application with Uvicorn.  Host and port are read
from the ``HOST`` and ``PORT`` environment variables through
``Settings``; defaults are ``0.0.0.0`` and ``8000``.

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from estoque_api.app.core.config import settings
from estoque_api.app.main import app


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
    asyncio.run(main())
