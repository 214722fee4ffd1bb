"""Structured logging configuration using structlog."""

import logging
import sys

import structlog

from yield_agent.config import settings

# Third-party stdlib loggers and the level they are capped at
QUIET_LOGGERS = {
    "apscheduler": logging.WARNING,
    "asyncio": logging.WARNING,
}


def _build_renderer_chain(fmt: str) -> list[structlog.typing.Processor]:
    """Final processors for the root handler's formatter."""
    if fmt == "json":
        # JSON has no traceback rendering of its own: turn exc_info into text
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    # ConsoleRenderer formats exc_info itself
    return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """
    Route structlog and stdlib logging (APScheduler) through one stdout handler.

    Args:
        level: Log level override (defaults to LOG_LEVEL)
        fmt: "json" or "console" override (defaults to LOG_FORMAT)
    """
    level = (level or settings.logging.level).upper()
    fmt = (fmt or settings.logging.format).lower()

    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            timestamper,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Module-level loggers may be used before setup_logging() runs
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        # Applied to records from plain stdlib loggers only
        foreign_pre_chain=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            timestamper,
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *_build_renderer_chain(fmt),
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level))

    for name, quiet_level in QUIET_LOGGERS.items():
        third_party = logging.getLogger(name)
        third_party.setLevel(logging.DEBUG if settings.debug else quiet_level)
        third_party.propagate = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)
