"""Disable client and proxy caching of API responses."""

from fastapi import Request, Response
from starlette.middleware.base import RequestResponseEndpoint

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


async def no_cache_middleware(request: Request, call_next: RequestResponseEndpoint) -> Response:
    response = await call_next(request)
    for header, value in NO_CACHE_HEADERS.items():
        response.headers.setdefault(header, value)
    return response
