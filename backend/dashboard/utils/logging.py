"""Structured logging setup with structlog and poll-cycle IDs.

Supports two output modes:
- "json": Machine-readable JSON lines (for unattended runs)
- "console": Human-readable colored output (for the terminal dashboard)

A cycle ID is injected via contextvars into every log entry emitted
while one fetch-then-reconcile cycle runs, so the fetch, the
reconciliation and any error of the same poll can be correlated.
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextvars import ContextVar

import structlog

_cycle_id: ContextVar[str] = ContextVar("cycle_id", default="")


def new_cycle_id() -> str:
    """Generate a short cycle ID and set it for the current context."""
    cid = uuid.uuid4().hex[:12]
    _cycle_id.set(cid)
    return cid


def set_cycle_id(cid: str) -> None:
    """Set the cycle ID for the current context."""
    _cycle_id.set(cid)


def get_cycle_id() -> str:
    """Get the cycle ID for the current context."""
    return _cycle_id.get()


def _add_cycle_id(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    """Inject cycle_id into every log entry."""
    cid = get_cycle_id()
    if cid:
        event_dict["cycle_id"] = cid
    return event_dict


def setup_logging(level: str = "INFO", log_format: str = "console") -> None:
    """Configure structlog for the dashboard.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Output format - "json" or "console".
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _add_cycle_id,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper()))

    # httpx logs every request at INFO; keep it out of the dashboard output
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a named structlog logger."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
