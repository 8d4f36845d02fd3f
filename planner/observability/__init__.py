"""
Observability module: structured logging and request/slot context.

Usage:
    from planner.observability import get_logger, RequestContext, SlotContext

    logger = get_logger(__name__)

    with RequestContext() as ctx, SlotContext("emp-7/2025-09-22/AM"):
        logger.info("Dropping task")
"""

from .context import (
    RequestContext,
    SlotContext,
    generate_request_id,
    get_request_id,
    get_slot_label,
    set_request_id,
)
from .logging import HumanFormatter, JSONFormatter, configure_logging, get_logger
from .middleware import CorrelationIdMiddleware

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "JSONFormatter",
    "HumanFormatter",
    # Context
    "RequestContext",
    "SlotContext",
    "generate_request_id",
    "get_request_id",
    "get_slot_label",
    "set_request_id",
    # Middleware
    "CorrelationIdMiddleware",
]
