"""Course Lifecycle - FastAPI Application.

- Workflow administration endpoints
- Health check endpoints
- Error handling
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from lifecycle.api import workflows
from lifecycle.api.workflows import ERROR_STATUS_CODES
from lifecycle.config import get_settings
from lifecycle.errors import LifecycleError
from lifecycle.logging_config import setup_logging

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan management."""
    setup_logging()

    from lifecycle.db.database import init_db

    logger.info("Starting %s v%s", settings.app_name, settings.app_version)
    await init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down %s", settings.app_name)


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Activation, ordering and removal of course lifecycle workflows",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.include_router(workflows.router)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions with standard error format."""
        if isinstance(exc.detail, dict) and "error" in exc.detail:
            content = exc.detail
        else:
            content = {
                "error": {
                    "code": f"HTTP_{exc.status_code}",
                    "message": exc.detail if isinstance(exc.detail, str) else str(exc.detail),
                }
            }
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(LifecycleError)
    async def lifecycle_exception_handler(request: Request, exc: LifecycleError):
        """Handle domain errors that escaped the endpoints."""
        return JSONResponse(
            status_code=ERROR_STATUS_CODES.get(type(exc), 400),
            content={"error": {"code": exc.code, "message": exc.message}},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.exception("Unhandled exception")
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                }
            },
        )

    @app.get("/health/live", tags=["health"])
    async def health_live():
        """Liveness check - process is running."""
        return {"status": "alive"}

    @app.get("/health/ready", tags=["health"])
    async def health_ready():
        """Readiness check - database is reachable."""
        from lifecycle.db.database import AsyncSessionLocal

        try:
            async with AsyncSessionLocal() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.warning("Database health check failed", exc_info=True)
            return JSONResponse(status_code=503, content={"status": "unavailable", "database": False})
        return {"status": "ready", "database": True}

    return app


app = create_app()
