"""Structured logging configuration."""

import logging
import sys
import uuid
from typing import Any, List
import structlog
from ..config import settings

REQUEST_ID_HEADER = "X-Request-ID"


def _renderer() -> Any:
    if settings.debug:
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def build_processors() -> List[Any]:
    """Processor chain; JSON output gets tracebacks rendered as strings."""
    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if not settings.debug:
        processors.append(structlog.processors.format_exc_info)
    processors.append(_renderer())
    return processors


def configure_logging() -> None:
    """Configure structured logging with structlog."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )
    # uvicorn's own access log would duplicate the per-request events below
    logging.getLogger("uvicorn.access").disabled = True

    structlog.configure(
        processors=build_processors(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def bind_request_context(request_id: str, method: str, path: str) -> None:
    """Attach request fields to every event logged while handling the request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def new_request_id() -> str:
    return uuid.uuid4().hex


def get_logger(name: str) -> Any:
    """Get structured logger instance."""
    return structlog.get_logger(name)
