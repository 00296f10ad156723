"""FastAPI application with lifespan and router mounting."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from uacaps.api.routes import health, lookup
from uacaps.cache import CachedLookup, create_cache
from uacaps.core.config import AppSettings
from uacaps.core.logging import setup_logging
from uacaps.core.protocols import ICacheBackend
from uacaps.engine.lookup import LookupEngine
from uacaps.engine.registry import get_engine, init_engine, is_initialized


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Load the dataset once and wire the lookup path before serving."""
    settings = AppSettings()
    setup_logging(settings.log_level)
    app.state.settings = settings

    engine = app.state.engine
    if engine is None:
        if is_initialized():
            engine = get_engine()
        else:
            engine = init_engine(settings.dataset.path, settings.dataset)
        app.state.engine = engine

    cache = app.state.cache
    if cache is None:
        cache = create_cache(settings)
        app.state.cache = cache

    app.state.lookup = (
        CachedLookup(engine, cache, ttl=settings.cache.ttl) if cache is not None else engine
    )
    yield


def create_app(engine: LookupEngine | None = None, cache: ICacheBackend | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    ``engine`` and ``cache`` override the ones the lifespan would build from
    settings.
    """
    app = FastAPI(
        title="uacaps User-Agent Capabilities",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.state.cache = cache
    app.include_router(health.router)
    app.include_router(lookup.router)
    return app
