"""
FastAPI application factory for the Taskify backend.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import Settings
from ..database.query_gateway import QueryGateway, get_gateway, shutdown_gateway
from ..database.schema import create_schema
from ..shared.exceptions import register_exception_handlers
from . import dependencies
from .routers import health, tasks

log = logging.getLogger(__name__)

API_PREFIX = "/api"


def _setup_middleware(app: FastAPI, settings: Settings) -> None:
    allowed_origins = settings.server.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials="*" not in allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    log.info("CORSMiddleware added with origins: %s", allowed_origins)


def _setup_routers(app: FastAPI) -> None:
    app.include_router(health.router)
    app.include_router(tasks.router, prefix=API_PREFIX)
    log.info("Routers mounted (tasks under %s)", API_PREFIX)


def create_app(
    settings: Optional[Settings] = None,
    gateway: Optional[QueryGateway] = None,
) -> FastAPI:
    """
    Build the Taskify FastAPI application.

    Args:
        settings: Configuration; read from the environment when omitted.
        gateway: Query gateway to use instead of building one from settings.

    The gateway is registered on startup and closed on shutdown, whether
    shutdown is clean or triggered by a failure during startup.
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        query_gateway = gateway or get_gateway(settings.database)
        dependencies.set_query_gateway(query_gateway)
        try:
            if settings.server.init_schema:
                await create_schema(query_gateway)
            await query_gateway.start()
            log.info("Taskify backend started")
            yield
        finally:
            dependencies.clear_query_gateway()
            if gateway is None:
                await shutdown_gateway()
            else:
                await query_gateway.close()
            log.info("Taskify backend stopped")

    app = FastAPI(
        title="Taskify",
        version=__version__,
        description="Minimal task tracker REST API.",
        lifespan=lifespan,
    )
    app.state.settings = settings

    _setup_middleware(app, settings)
    _setup_routers(app)
    register_exception_handlers(app)
    return app
