"""FastAPI application for Legal Uplifter.

The lifespan builds the service container (unless one is injected), starts
the background job workers, and drains them on shutdown.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app.api.deps import AppServices, build_services
from backend.app.api.routes.chat import router as chat_router
from backend.app.api.routes.documents import router as documents_router
from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.api.routes.profile import router as profile_router
from backend.app.config import get_settings
from backend.app.errors import NotFoundError
from backend.app.utils.logging import configure_logging

logger = logging.getLogger(__name__)


async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    """Absent and foreign entities both map to a plain 404."""
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


def create_app(services: AppServices | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        services: Prebuilt service container (tests); built from settings if None

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level)

        container = services if services is not None else await build_services(settings)
        app.state.services = container
        await container.queue.start()

        yield

        await container.queue.stop()
        if container.engine is not None:
            await container.engine.dispose()
        logger.info("Job queue stopped, shutdown complete")

    app = FastAPI(title="Legal Uplifter API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.ui_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(NotFoundError, not_found_handler)

    app.include_router(health_router, tags=["health"])
    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(documents_router)
    app.include_router(chat_router)
    app.include_router(profile_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {"message": "Legal Uplifter API", "version": "0.1.0"}

    return app


app = create_app()
