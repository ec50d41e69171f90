"""
Request context management for log correlation.

Uses contextvars for async-safe context propagation.

Usage:
    # In middleware (automatic)
    set_request_id(generate_request_id())

    # In error handlers
    capture_exception(exc, context={"request_id": get_request_id()})
"""

from contextvars import ContextVar
from typing import Optional
import uuid

__all__ = [
    "set_request_id",
    "get_request_id",
    "generate_request_id",
    "set_user_id",
    "get_user_id",
    "clear_context",
    "get_context_dict",
]

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_user_id: ContextVar[Optional[int]] = ContextVar("user_id", default=None)


def generate_request_id() -> str:
    """
    Generate a new request ID.

    Format: req_{16 hex chars}
    """
    return f"req_{uuid.uuid4().hex[:16]}"


def set_request_id(request_id: str) -> None:
    _request_id.set(request_id)


def get_request_id() -> Optional[str]:
    return _request_id.get()


def set_user_id(user_id: int) -> None:
    """Set user ID for current context (after token verification)."""
    _user_id.set(user_id)


def get_user_id() -> Optional[int]:
    return _user_id.get()


def clear_context() -> None:
    """Called at end of request to prevent context leaking."""
    _request_id.set(None)
    _user_id.set(None)


def get_context_dict() -> dict:
    """Get all context variables as dict, for enriching error reports."""
    return {
        "request_id": get_request_id(),
        "user_id": get_user_id(),
    }
