"""FastAPI application factory with async lifespan for the database."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from notifyhub.api.v1.router import v1_router
from notifyhub.config import get_settings
from notifyhub.database import close_db, get_session_factory, init_db
from notifyhub.services.generators import RandomIDGenerator, SystemClock


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle.

    On startup: initialize the database engine and session factory.
    On shutdown: dispose of the engine.
    """
    settings = get_settings()

    engine = await init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    app.state.db_engine = engine
    app.state.session_factory = get_session_factory(engine)

    yield

    await close_db(engine)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    This is the app factory. Uvicorn calls it with the --factory flag:
        uvicorn notifyhub.app:create_app --factory
    """
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(
        title="Notifyhub",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    app.state.id_generator = RandomIDGenerator()
    app.state.clock = SystemClock()

    app.include_router(v1_router, prefix=settings.api_prefix)

    return app
