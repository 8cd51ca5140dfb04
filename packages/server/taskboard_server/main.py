"""
TaskBoard API Server

Entry point for the FastAPI application.
"""

from __future__ import annotations

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskboard_server.api.errors import register_error_handlers
from taskboard_server.api.v1 import router as api_router
from taskboard_server.core.config import Settings, get_settings
from taskboard_server.core.middleware import RequestLogMiddleware
from taskboard_server.services.descriptions import DescriptionGenerator, DescriptionService
from taskboard_server.services.tasks import TaskService
from taskboard_server.services.users import UserService
from taskboard_server.store import RowStore, build_store
from taskboard_shared.logging import configure_logging

log = structlog.get_logger()


def create_app(
    settings: Settings | None = None,
    store: RowStore | None = None,
    generator: DescriptionGenerator | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format)
    store = store if store is not None else build_store(settings)

    app = FastAPI(
        title="TaskBoard",
        description="Task board over a row-oriented store.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings
    app.state.store = store
    app.state.task_service = TaskService(store)
    app.state.user_service = UserService(store)
    app.state.description_service = DescriptionService(generator)

    # Middleware (order matters: outermost last)
    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "X-Request-ID"],
    )

    register_error_handlers(app, coarse=settings.coarse_errors)
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint for liveness probes."""
        return {"status": "ok"}

    @app.on_event("startup")
    async def on_startup():
        log.info(
            "taskboard.starting",
            store=settings.store_backend,
            coarse_errors=settings.coarse_errors,
        )

    @app.on_event("shutdown")
    async def on_shutdown():
        log.info("taskboard.shutting_down")
        await store.close()

    return app


def run() -> None:
    """CLI entry point: serve the API with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "taskboard_server.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    run()
