"""Service banner and health probe."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.ticprojects.core.config import get_settings
from src.ticprojects.core.db import get_session
from src.ticprojects.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["system"])


@router.get("/api", response_class=PlainTextResponse, include_in_schema=False)
async def banner() -> str:
    return f"{get_settings().app_name} API is running"


@router.get("/health", summary="Liveness and database check")
async def health() -> JSONResponse:
    database = "healthy"
    try:
        async with get_session() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Health check failed", error=str(e))
        database = "unhealthy"

    healthy = database == "healthy"
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={"status": "healthy" if healthy else "unhealthy", "database": database},
    )
