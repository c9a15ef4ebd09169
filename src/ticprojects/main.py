import secrets
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.security import APIKeyHeader
from fastapi.staticfiles import StaticFiles
from prometheus_fastapi_instrumentator import Instrumentator

from src.ticprojects.api.middlewares import setup_middlewares
from src.ticprojects.api.routes.router import api_router
from src.ticprojects.core.config import Settings, get_settings
from src.ticprojects.core.db import dispose_engine, run_migrations_async
from src.ticprojects.core.exceptions import AuthError, setup_exception_handlers
from src.ticprojects.core.logging import get_logger, setup_logging

logger = get_logger(__name__)

OPENAPI_TAGS = [
    {"name": "auth", "description": "Registration, login and token issuance"},
    {"name": "projects", "description": "Project publishing and management"},
    {"name": "system", "description": "Health and status"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Prepare the upload directory and schema on startup; release the engine on shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info("Starting service", app_name=settings.app_name, app_env=settings.app_env)

    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)

    if settings.auto_migrate:
        logger.info("Applying database migrations")
        await run_migrations_async()

    yield

    await dispose_engine()
    logger.info("Service stopped")


def _setup_metrics(app: FastAPI, settings: Settings) -> None:
    """Expose Prometheus metrics, behind X-Metrics-Key when METRICS_API_KEY is set."""
    instrumentator = Instrumentator(excluded_handlers=["/metrics", "/health"]).instrument(app)

    if not settings.metrics_api_key:
        instrumentator.expose(app, endpoint="/metrics")
        return

    expected_key = settings.metrics_api_key
    metrics_key = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

    async def require_metrics_key(api_key: str | None = Depends(metrics_key)) -> None:
        if api_key is None or not secrets.compare_digest(api_key, expected_key):
            raise AuthError("Invalid or missing metrics API key")

    instrumentator.expose(app, endpoint="/metrics", dependencies=[Depends(require_metrics_key)])


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Publish, browse and manage TIC projects",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    setup_exception_handlers(app)
    setup_middlewares(app, settings)
    app.include_router(api_router)

    # Uploaded attachments are served as-is, outside the API routes
    app.mount(
        settings.upload_url_path,
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )

    _setup_metrics(app, settings)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "src.ticprojects.main:app",
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )
