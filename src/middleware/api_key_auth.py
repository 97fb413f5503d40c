"""API key check for the report endpoints."""

from __future__ import annotations

import logging
import secrets

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from src.config import settings

logger = logging.getLogger(__name__)


def _is_protected(request: Request) -> bool:
    if request.method == "OPTIONS":
        return False
    return request.url.path.startswith(settings.api_prefix)


class ApiKeyAuthMiddleware(BaseHTTPMiddleware):
    """Require X-API-Key on report routes when HAR_REPORT_API_KEY is set.

    Health checks and the OpenAPI docs stay open.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        expected_key = settings.api_key
        if not expected_key or not _is_protected(request):
            return await call_next(request)

        provided_key = request.headers.get("X-API-Key", "")
        if not secrets.compare_digest(provided_key.encode(), expected_key.encode()):
            logger.warning("Rejected %s %s: invalid or missing X-API-Key", request.method, request.url.path)
            return JSONResponse(
                status_code=401,
                content={"detail": "Invalid or missing X-API-Key"},
            )

        return await call_next(request)
