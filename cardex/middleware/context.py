"""
Request context middleware for observability.

Injects a request_id into every request for log correlation and logs the
completion of each request with its status and duration.

Headers:
- X-Request-ID: Unique ID for this request (generated if not provided)
"""

import re
import time
from typing import Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from cardex.core.context import (
    set_request_id,
    generate_request_id,
    clear_context,
)

logger = structlog.get_logger(__name__)

SLOW_REQUEST_THRESHOLD_MS = 500.0

# Request ID validation to prevent log injection attacks
MAX_ID_LENGTH = 64
SAFE_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_\-]+$")

EXCLUDED_PATHS = frozenset({"/health"})


def _validate_id(value: Optional[str]) -> Optional[str]:
    """
    Validate a client-provided request ID.

    Returns None if invalid (a generated ID is used instead).
    """
    if not value:
        return None
    if len(value) > MAX_ID_LENGTH:
        return None
    if not SAFE_ID_PATTERN.match(value):
        return None
    return value


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Binds a request ID to structlog for the duration of a request.

    - Extracts X-Request-ID from headers or generates one
    - Adds it to response headers for client debugging
    - Logs request completion (warning when slow)
    - Cleans up context after request completes
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = _validate_id(request.headers.get("X-Request-ID")) or generate_request_id()
        set_request_id(request_id)
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
        )

        start_time = time.perf_counter()
        status_code = 500  # Default to error in case of exception

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            if request.url.path not in EXCLUDED_PATHS:
                log = logger.warning if duration_ms >= SLOW_REQUEST_THRESHOLD_MS else logger.info
                log("Request completed", status_code=status_code, duration_ms=round(duration_ms, 1))

            clear_context()
            structlog.contextvars.clear_contextvars()
