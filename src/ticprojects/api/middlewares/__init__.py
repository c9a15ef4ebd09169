"""HTTP middleware stack."""

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from src.ticprojects.core.config import Settings

from .logging_context import logging_context_middleware
from .no_cache import no_cache_middleware

__all__ = [
    "setup_middlewares",
    "logging_context_middleware",
    "no_cache_middleware",
]

ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE"]
ALLOWED_HEADERS = ["Authorization", "Content-Type", "X-Request-ID"]


def setup_middlewares(app: FastAPI, settings: Settings) -> None:
    """Install middlewares innermost first.

    Request order: correlation id, CORS, log context, no-cache headers.
    """
    app.add_middleware(BaseHTTPMiddleware, dispatch=no_cache_middleware)
    app.add_middleware(BaseHTTPMiddleware, dispatch=logging_context_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
    )
    app.add_middleware(CorrelationIdMiddleware)
