"""HTTP application for the surf session planner.

`create_app()` wires the planner and forecast routers behind CORS, and ties
the database engine to the application lifespan. Interactive docs are only
served when `DEBUG` is set. Run it with `surf-planner serve`.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from surf_planner.api.routes import forecast, planner
from surf_planner.config import get_settings
from surf_planner.database.connection import close_db, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    logger.info(f"{settings.app_name} {settings.app_version} starting")
    await init_db()
    try:
        yield
    finally:
        await close_db()
        logger.info(f"{settings.app_name} stopped")


def create_app() -> FastAPI:
    """Build the planner application from the current settings."""
    settings = get_settings()
    docs = settings.debug

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Ranked surf session windows from forecasts, preferences and availability",
        docs_url="/docs" if docs else None,
        redoc_url="/redoc" if docs else None,
        openapi_url="/openapi.json" if docs else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT"],
        allow_headers=["*"],
    )

    app.include_router(planner.router, prefix="/api/planner", tags=["Planner"])
    app.include_router(forecast.router, prefix="/api/forecast", tags=["Forecast"])

    @app.get("/health", tags=["Health"])
    async def health_check():
        return {"status": "healthy", "version": settings.app_version}

    return app
