# src/cipherdrop/main.py
"""Main entry point for the Cipherdrop application."""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from cipherdrop.api.v1 import pages_router, pastes_router, system_router
from cipherdrop.core.settings import Settings, settings as default_settings
from cipherdrop.services.pastes import PasteService
from cipherdrop.services.reaper import Reaper
from cipherdrop.services.store import Clock, EphemeralStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run the Reaper for as long as the application serves requests."""
    reaper: Reaper = app.state.reaper
    await reaper.start()
    logger.info("Reaper started (interval %.0fs)", reaper.interval)
    try:
        yield
    finally:
        await reaper.stop()
        logger.info("Server shutting down.")


def create_app(settings: Settings | None = None, *, clock: Clock | None = None) -> FastAPI:
    """Build an application with its own store, paste service and Reaper.

    Args:
        settings: Configuration to use; the process-wide settings if omitted
        clock: Optional time source for the store, used by tests

    Returns:
        Configured FastAPI application
    """
    settings = settings or default_settings

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Ephemeral storage for client-side encrypted pastes",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    store = EphemeralStore.from_settings(settings, clock=clock or time.monotonic)
    app.state.settings = settings
    app.state.store = store
    app.state.paste_service = PasteService.from_settings(store, settings)
    app.state.reaper = Reaper(store, settings.reaper_interval_seconds)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=settings.cors_allow_methods,
            allow_headers=settings.cors_allow_headers,
        )

    # Add GZip middleware for compression
    app.add_middleware(GZipMiddleware)

    app.include_router(pages_router)
    app.include_router(pastes_router)
    app.include_router(system_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint to verify the service is running."""
        return {"status": "ok"}

    return app


app = create_app()
