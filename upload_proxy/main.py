"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory (create_app) so tests can build an app with
their own settings and object store.

For local development:
    uvicorn upload_proxy.main:create_app --factory --reload

For production:
    upload-proxy
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .api.errors import RequestMethodError, http_error_handler, request_method_error_handler
from .api.routes import health, objects
from .config.settings import ConfigError, Settings, get_settings
from .infrastructure.storage.client import (
    BackendConstructionError,
    ObjectStore,
    create_object_store,
)
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown with the effective configuration."""
    settings: Settings = app.state.settings

    logger.info(
        "Upload proxy starting",
        extra={
            "version": __version__,
            "bucket": settings.bucket_name,
            "driver": settings.upload_driver,
            "cache_control_rules": len(settings.cache_control_rules),
        }
    )

    yield

    logger.info("Upload proxy shutting down")


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ObjectStore] = None,
) -> FastAPI:
    """
    Application factory.

    Both arguments default to the process configuration: settings from
    the environment, and the object store they select.
    """
    if settings is None:
        settings = get_settings()
    if store is None:
        store = create_object_store(settings)

    # No docs routes: every path outside the health check is an object key.
    app = FastAPI(
        title="Upload Proxy",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.object_store = store

    app.add_exception_handler(RequestMethodError, request_method_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    # Health check first: it must win over the catch-all object route.
    app.include_router(health.create_router(settings.healthcheck_path), tags=["Health"])
    app.include_router(objects.router, tags=["Objects"])

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Catch-all exception handler.

        Storage failures are answered by the routes themselves; anything
        reaching here is a bug, so the client gets a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"}
        )

    return app


def run() -> None:
    """
    Console entry point.

    Configuration and backend errors are fatal: they are logged and the
    process exits before the listener opens.
    """
    try:
        settings = get_settings()
    except ConfigError as e:
        configure_logging("error")
        logger.critical("Failed to load configuration", extra={"error": str(e)})
        sys.exit(1)

    level = configure_logging(settings.log_level)

    try:
        store = create_object_store(settings)
    except BackendConstructionError as e:
        logger.critical("Failed to create object store", extra={"error": str(e)})
        sys.exit(1)

    app = create_app(settings, store)

    logger.info("Listening on 0.0.0.0:%d", settings.http_port)
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.http_port,
        log_config=None,
        log_level=logging.getLevelName(level).lower(),
    )


if __name__ == "__main__":
    run()
