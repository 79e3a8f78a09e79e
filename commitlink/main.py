"""FastAPI application factory with lifespan context manager."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from commitlink.config import settings
from commitlink.db.engine import dispose_engine, init_engine
from commitlink.logging_config import configure_logging
from commitlink.middleware.api_key import ApiKeyMiddleware
from commitlink.routers import admin, health, tasks, webhooks


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: logging, database engine and notifier."""
    configure_logging(json_logs=not settings.debug, log_level=settings.log_level)
    await init_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
    )

    if settings.gcp_project:
        from commitlink.dependencies import init_production_deps

        init_production_deps(
            gcp_project=settings.gcp_project,
            gcp_location=settings.gcp_location,
            cloud_tasks_queue=settings.cloud_tasks_queue,
            notification_handler_url=settings.notification_handler_url,
        )

    if not settings.github_webhook_secret:
        structlog.get_logger().warning("webhook_signature_verification_disabled")

    yield
    await dispose_engine()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(ApiKeyMiddleware)

if settings.cors_origins:
    from fastapi.middleware.cors import CORSMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",")],
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for any unhandled exception."""
    logger = structlog.get_logger()
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(health.router)
app.include_router(webhooks.router)
app.include_router(tasks.router)
app.include_router(admin.router)
