"""Structured logging utilities using structlog for pipeline and store context.

Stores and the ingestion trigger log through structlog with event-name
messages (``analysis_saved``, ``triage_failed``) and keyword fields, so one
triage run can be followed across components by its ``report_id`` and
``correlation_id``.
"""

import sys
import uuid
from typing import Any, Optional
import structlog
from structlog.processors import JSONRenderer
from structlog.contextvars import merge_contextvars

from alerto_triage.config.settings import settings

# Same dev/prod switch as the loguru sinks in alerto_triage.config.logging
IS_TTY = sys.stderr.isatty()


def configure_structured_logging() -> None:
    """
    Configure structured logging with appropriate processors and renderers.

    Uses:
    - Console renderer for development (colorized, human-readable)
    - JSON renderer for production (structured, machine-readable)
    - Context binding for report_id and correlation_id
    """
    processors = [
        merge_contextvars,  # Context set with structlog.contextvars.bind_contextvars
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,  # log.exception("triage_failed") tracebacks
    ]

    if IS_TTY and settings.log_format.lower() == "console":
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    else:
        processors.append(JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.log_level.upper()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_structured_logger(
    name: str,
    report_id: Optional[str] = None,
    **additional_context: Any,
) -> structlog.BoundLogger:
    """
    Get a structured logger with bound context.

    Args:
        name: Logger name, bound as ``component``
        report_id: Optional report ID to bind
        **additional_context: Additional context to bind

    Returns:
        Configured BoundLogger instance with context

    Example:
        >>> logger = get_structured_logger("AnalysisStore")
        >>> logger.info("analysis_saved", report_id="abc", score=0.9)
    """
    logger = structlog.get_logger(name).bind(component=name)

    if report_id:
        logger = logger.bind(report_id=report_id)

    if additional_context:
        logger = logger.bind(**additional_context)

    return logger


def get_correlation_id() -> str:
    """
    Generate a correlation ID for tracing one triage run across components.

    Returns:
        UUID string for correlation
    """
    return str(uuid.uuid4())


def bind_triage_context(
    logger: structlog.BoundLogger,
    report_id: str,
    correlation_id: Optional[str] = None,
) -> structlog.BoundLogger:
    """
    Bind the report being triaged and a run correlation id to a logger.

    Args:
        logger: Existing logger instance
        report_id: Report the run is about
        correlation_id: Run id; a fresh one is generated if omitted

    Returns:
        Logger with bound triage context
    """
    return logger.bind(
        report_id=report_id,
        correlation_id=correlation_id or get_correlation_id(),
    )


configure_structured_logging()


__all__ = [
    "get_structured_logger",
    "get_correlation_id",
    "bind_triage_context",
    "configure_structured_logging",
]
