"""
Error taxonomy and unified error handling.

Provides:
- The exception hierarchy raised by the storage layer and the core services
- Structured capture of unexpected errors with request context enrichment
- FastAPI exception handlers mapping each error to its HTTP response

Usage:
    # Capture an exception
    capture_exception(exc, context={"card_id": 123})

    # Wire handlers into the app
    register_exception_handlers(app)
"""

from typing import Optional, Any, Dict
from datetime import datetime, timezone

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from cardex.core.context import get_context_dict

logger = structlog.get_logger(__name__)

__all__ = [
    "CardexError",
    "StoreError",
    "IntegrityViolation",
    "NotFound",
    "AuthFailure",
    "InvalidCredentials",
    "DuplicatePrincipal",
    "capture_exception",
    "register_exception_handlers",
]

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"


class CardexError(Exception):
    """Base class for every error raised by the service."""


class StoreError(CardexError):
    """The relational store could not be reached or rejected a statement."""


class IntegrityViolation(StoreError):
    """The store rejected a write because of a constraint (e.g. unique key)."""


class NotFound(CardexError):
    """A single-record lookup matched nothing."""

    def __init__(self, resource: str, key: Any):
        self.resource = resource
        self.key = key
        super().__init__(f"{resource} not found")


class AuthFailure(CardexError):
    """Authentication did not succeed."""


class InvalidCredentials(AuthFailure):
    """
    Uniform invalid-credentials outcome.

    Raised identically for an unknown principal and for a wrong secret so
    callers cannot enumerate registered principals.
    """

    def __init__(self):
        super().__init__(INVALID_CREDENTIALS_MESSAGE)


class DuplicatePrincipal(CardexError):
    """A principal with the same name is already registered."""

    def __init__(self, username: str):
        self.username = username
        super().__init__("Principal already exists")


def capture_exception(
    exc: BaseException,
    context: Optional[Dict[str, Any]] = None,
    level: str = "error",
) -> None:
    """
    Log an exception with request context.

    Args:
        exc: Exception to capture
        context: Additional context dict (e.g., {"card_id": 123})
        level: Severity level (debug, info, warning, error, critical)
    """
    enriched_context = {
        **get_context_dict(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "error_type": type(exc).__name__,
        **(context or {}),
    }

    log_func = getattr(logger, level, logger.error)
    log_func("Exception captured", exc_info=exc, **enriched_context)


async def _not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def _auth_failure_handler(request: Request, exc: AuthFailure) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"success": False, "message": INVALID_CREDENTIALS_MESSAGE},
    )


async def _duplicate_principal_handler(request: Request, exc: DuplicatePrincipal) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"success": False, "message": str(exc)},
    )


async def _store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    # Details stay in the logs, the client only learns that the server failed
    capture_exception(exc, context={"path": request.url.path, "method": request.method})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map the error taxonomy onto HTTP responses."""
    app.add_exception_handler(NotFound, _not_found_handler)
    app.add_exception_handler(AuthFailure, _auth_failure_handler)
    app.add_exception_handler(DuplicatePrincipal, _duplicate_principal_handler)
    app.add_exception_handler(StoreError, _store_error_handler)
