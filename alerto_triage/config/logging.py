"""Production-grade logging configuration using loguru with automatic dev/prod detection."""

import sys
from loguru import logger

from alerto_triage.config.settings import settings


def configure_logging() -> None:
    """
    Configure loguru based on environment settings.

    Behavior:
    - Development (TTY + console format): Colorized, human-readable output
    - Production (non-TTY or json format): JSON-structured logs to stdout
    - Respects ALERTO_LOG_LEVEL from settings
    """
    # Drop loguru's default stderr sink before adding ours
    logger.remove()
    # Scorer, bus and CLI records all carry a component; this is the fallback
    logger.configure(extra={"component": "alerto"})

    # Interactive terminal vs. piped/containerised run
    is_tty = sys.stderr.isatty()
    use_console_format = settings.log_format.lower() == "console"

    if is_tty and use_console_format:
        # Operator at a terminal: colorized one-line records
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[component]}</cyan> | <level>{message}</level>",
            level=settings.log_level,
            colorize=True,
        )
    else:
        # Deployed pipeline: one JSON object per record on stdout
        logger.add(
            sys.stdout,
            format="{message}",
            level=settings.log_level,
            serialize=True,  # Bound extras (report_id, flags...) become JSON fields
            diagnose=False,  # Report contents stay out of tracebacks
        )


def get_logger(component: str):
    """
    Get a logger instance bound to a specific component name.

    Args:
        component: Component/module name for log context

    Returns:
        Logger instance with component context

    Example:
        >>> log = get_logger("triage.scorer")
        >>> log.info("Scoring report")
    """
    return logger.bind(component=component)


# Sinks are installed once, when the package is first imported
configure_logging()

__all__ = ["logger", "get_logger", "configure_logging"]
