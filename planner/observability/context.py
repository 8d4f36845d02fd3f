"""
Request and slot context carried through log records.
"""

import contextvars
import uuid
from typing import Optional

_request_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "request_id", default=None
)
_slot_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("slot", default=None)


def get_request_id() -> Optional[str]:
    """Get the current request ID from context."""
    return _request_id_var.get()


def set_request_id(request_id: str) -> contextvars.Token:
    """Set the request ID in context. Returns token for reset."""
    return _request_id_var.set(request_id)


def generate_request_id() -> str:
    """Generate a new request ID."""
    return f"req-{uuid.uuid4().hex[:16]}"


def get_slot_label() -> Optional[str]:
    """Label of the slot currently being rearranged, if any."""
    return _slot_var.get()


class RequestContext:
    """
    Context manager for request-scoped operations.

    Usage:
        with RequestContext() as ctx:
            logger.info("Processing drop")

        with RequestContext(request_id="req-abc123"):
            ...
    """

    def __init__(self, request_id: Optional[str] = None):
        self.request_id = request_id or generate_request_id()
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> "RequestContext":
        self._token = set_request_id(self.request_id)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _request_id_var.reset(self._token)


class SlotContext:
    """
    Tag every log line emitted inside the block with a slot label
    such as ``emp-7/2025-09-22/AM``.
    """

    def __init__(self, label: str):
        self.label = label
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> "SlotContext":
        self._token = _slot_var.set(self.label)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _slot_var.reset(self._token)
