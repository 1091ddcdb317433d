"""
Structured logging for socialgraph.

Every module logs through ``get_logger(__name__)`` with event-style messages
and keyword context. Request-scoped values (request id, GraphQL operation)
live in context variables and are merged into each event.
"""

import logging
import secrets
import sys
from contextvars import ContextVar
from typing import Any

import structlog

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
operation_ctx: ContextVar[str | None] = ContextVar("graphql_operation", default=None)


def add_request_context(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor merging the current request context into the event."""
    _ = logger, method_name

    for key, var in (("request_id", request_id_ctx), ("graphql_operation", operation_ctx)):
        value = var.get()
        if value:
            event_dict.setdefault(key, value)
    return event_dict


def _renderer(debug: bool) -> Any:
    if debug:
        return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    return structlog.processors.JSONRenderer()


def configure_logging(debug: bool = False, level: str | None = None) -> None:
    """Route structlog through stdlib logging.

    Args:
        debug: Render human-readable console lines instead of JSON
        level: Explicit level name; defaults to DEBUG in debug mode, INFO otherwise
    """
    if level is None:
        level = "DEBUG" if debug else "INFO"

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stdout,
        format="%(message)s",
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            add_request_context,
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(debug),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def generate_request_id() -> str:
    """Return a short random URL-safe request id (16 characters)."""
    return secrets.token_urlsafe(12)


def set_request_context(request_id: str | None = None, operation: str | None = None) -> str:
    """Bind the request id (generated when omitted) and operation name.

    Returns:
        The request id now in effect
    """
    request_id = request_id or generate_request_id()
    request_id_ctx.set(request_id)
    if operation is not None:
        operation_ctx.set(operation)
    return request_id


def clear_request_context() -> None:
    request_id_ctx.set(None)
    operation_ctx.set(None)
