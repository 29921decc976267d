"""
Main entrypoint for the Dog Tracker API.

This module assembles the FastAPI application, sets up logging and
includes the versioned routers.  ``create_app`` builds and configures
the app, which is then instantiated at module import time as ``app``
so it can be served directly, e.g.::

    uvicorn dog_tracker_api.app.main:app --reload

The application title and version are provided via ``Settings`` from
``core.config``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from .api.v1.endpoints import pages
from .api.v1.router import router as v1_router
from .core.config import settings
from .core.logging_config import setup_logging
from .services.dog_service import DogService
from .services.dog_store import DogStore, InMemoryDogStore, SQLiteDogStore

logger = logging.getLogger(__name__)


def build_store() -> DogStore:
    """Return the store selected by ``settings.database_url``."""
    if settings.database_url == ":memory:":
        return InMemoryDogStore()
    return SQLiteDogStore()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Prepare the dog store before the first request is served."""
    # Creates the database file and applies migrations when needed.
    await app.state.dog_service.store.initialise()
    logger.info("%s %s started", settings.project_name, settings.api_version)
    yield


def create_app(store: Optional[DogStore] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    store : Optional[DogStore]
        Store the dog routes run against.  Defaults to the one chosen
        by ``build_store``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.dog_service = DogService(store or build_store())

    app.include_router(v1_router, prefix="/api/v1")
    app.include_router(pages.router, tags=["pages"])

    return app


# Created at import time so that uvicorn can discover it without
# calling create_app manually.
app = create_app()
