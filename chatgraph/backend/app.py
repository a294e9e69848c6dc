"""FastAPI application factory for the chatgraph backend."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from chatgraph import __version__
from chatgraph.backend.config import get_config
from chatgraph.backend.errors import AppError

log = logging.getLogger("chatgraph.backend.app")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    config = get_config()
    log.info("Starting chatgraph backend in %s mode on %s:%s", config.mode.value, config.host, config.port)
    app.state.config = config
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="chatgraph Backend",
        description="Workspace API for the chatgraph chat application",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Render application errors with their code."""
        return exc.to_response()

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions with mode-aware verbosity."""
        cfg = get_config()
        if cfg.verbose_errors:
            log.exception("Unhandled exception: %s", exc)
            return JSONResponse(
                status_code=500,
                content={"detail": str(exc), "type": type(exc).__name__},
            )
        log.error("Internal error (sanitized): %s: %s", type(exc).__name__, exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    from chatgraph.backend.api import router as api_router

    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint for load balancers."""
        cfg = get_config()
        return {
            "status": "healthy",
            "service": "chatgraph-backend",
            "mode": cfg.mode.value,
        }

    return app
