"""
Main entrypoint for the Estoque API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app``, e.g.::

    uvicorn estoque_api.app.main:app --reload

The application title and version are provided via ``Settings`` from
``core.config``.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.logging_config import setup_logging


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Configures logging, mounts the v1 routes under ``/api/v1`` and
    installs a lifespan handler that applies database migrations
    before the first request is served.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that the lifespan handler below can log.
    setup_logging(settings.log_level, settings.log_file or None)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Creates the database file on first run.
        init_db()
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()
