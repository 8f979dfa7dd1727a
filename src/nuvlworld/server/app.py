"""FastAPI application serving the calendar display API."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..services.world import World, load_world
from .config import NuvlWorldConfig
from .routes import router

# Global world instance (set during lifespan)
_world: Optional[World] = None
_config: Optional[NuvlWorldConfig] = None

logger = logging.getLogger("nuvlworld.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global _world, _config

    config: NuvlWorldConfig = app.state.config

    # Validate config
    errors = config.validate()
    if errors:
        for error in errors:
            logger.warning("Config error: %s", error)
        raise ValueError(f"Configuration errors: {errors}")

    logger.info(
        "Loading %d fact files (display zone: %s)",
        len(config.data.fact_files), config.display.time_zone,
    )

    # Load errors propagate and abort startup
    _config = config
    _world = load_world(config)

    logger.info("World loaded: %d facts", len(_world.store))

    yield

    logger.info("Shutting down nuvl-world service")
    _world = None
    _config = None


def create_app(config: Optional[NuvlWorldConfig] = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        config: Service configuration. If None, loads from environment.

    Returns:
        Configured FastAPI application.
    """
    if config is None:
        config = NuvlWorldConfig.from_env()

    app = FastAPI(
        title="Nuvl World",
        description="Calendar view over a triple fact store",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store config for lifespan access
    app.state.config = config

    # CORS middleware (localhost only)
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"http://(localhost|127\.0\.0\.1)(:\d+)?",
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.get("/")
    async def root():
        return {
            "service": "nuvl-world",
            "version": "0.1.0",
            "docs": "/docs",
        }

    return app


def run_server(
    config: Optional[NuvlWorldConfig] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
    log_level: str = "info",
):
    """Run the HTTP server.

    Args:
        config: Service configuration. If None, loads from environment.
        host: Override host from config.
        port: Override port from config.
        log_level: Logging level.
    """
    if config is None:
        config = NuvlWorldConfig.from_env()

    app = create_app(config)

    uvicorn.run(
        app,
        host=host or config.server.host,
        port=port or config.server.port,
        log_level=log_level,
    )
