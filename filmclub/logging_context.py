"""
Context management for request and member ID propagation.

Request and member IDs are stored in contextvars and bound to structlog so
every log line emitted while serving a request carries them.
"""

import uuid
from contextvars import ContextVar
from typing import Optional
import structlog

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
member_id_var: ContextVar[Optional[str]] = ContextVar("member_id", default=None)


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return str(uuid.uuid4())


def set_request_id(request_id: Optional[str] = None) -> str:
    """
    Set the request ID in context.

    Args:
        request_id: Optional request ID (generates new one if not provided)

    Returns:
        The request ID that was set
    """
    if request_id is None:
        request_id = generate_request_id()

    request_id_var.set(request_id)
    structlog.contextvars.bind_contextvars(request_id=request_id)
    return request_id


def get_request_id() -> Optional[str]:
    return request_id_var.get()


def set_member_id(member_id: str) -> str:
    """
    Set the calling member's ID in context.

    Args:
        member_id: Opaque member identifier from the request

    Returns:
        The member ID that was set
    """
    member_id_var.set(member_id)
    structlog.contextvars.bind_contextvars(member_id=member_id)
    return member_id


def get_member_id() -> Optional[str]:
    return member_id_var.get()


def clear_context():
    """
    Clear all context variables.

    Called after each request so IDs do not leak into the next one.
    """
    request_id_var.set(None)
    member_id_var.set(None)
    structlog.contextvars.clear_contextvars()
