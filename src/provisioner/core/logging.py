"""Logging configuration using structlog."""

import logging
import sys
from uuid import UUID

import structlog
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError
from structlog.contextvars import bind_contextvars, clear_contextvars, unbind_contextvars


def setup_logging(debug: bool = False) -> None:
    """Configure structlog for structured logging.

    Args:
        debug: If True, use colored console output. If False, use JSON for production.
    """
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    shared_processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        processors = shared_processors + [structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Set library log levels to reduce noise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("alembic").setLevel(logging.WARNING)
    logging.getLogger("temporalio").setLevel(logging.INFO)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Optional logger name.

    Returns:
        A bound structlog logger.
    """
    return structlog.get_logger(name)


def bind_request_context(
    request_id: str | None, *, method: str | None = None, path: str | None = None
) -> None:
    """Bind request-level context to all subsequent log calls.

    Args:
        request_id: The correlation ID for the current request.
        method: HTTP method of the request.
        path: Request path.
    """
    context = {"request_id": request_id, "http_method": method, "http_path": path}
    bind_contextvars(**{key: value for key, value in context.items() if value})


def bind_provisioning_context(tenant_id: UUID, run_id: str) -> None:
    """Bind the tenant and provisioning run to all subsequent log calls.

    Every event emitted during one provisioning run carries the same
    ``provisioning_run_id`` so a log pipeline can reassemble the run.
    """
    bind_contextvars(tenant_id=str(tenant_id), provisioning_run_id=run_id)


def clear_provisioning_context() -> None:
    """Remove provisioning run keys, keeping request context intact."""
    unbind_contextvars("tenant_id", "provisioning_run_id")


def clear_request_context() -> None:
    """Clear all request-scoped context."""
    clear_contextvars()


def redact_url(url: str | None) -> str | None:
    """Return a connection URL with its password masked, safe for logs.

    Unparseable input is fully masked rather than echoed back.
    """
    if url is None:
        return None
    try:
        parsed = make_url(url)
    except ArgumentError:
        return "***"
    return parsed.render_as_string(hide_password=True)
