"""Structured logging setup shared by the API and the git engine."""

import logging

import structlog
from structlog.types import FilteringBoundLogger

from .settings import Settings


def configure_logging(settings: Settings) -> None:
    """Route stdlib logging through structlog with a pretty or JSON renderer."""
    if settings.LOG_FORMAT.lower() == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=settings.DEBUG)

    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.root.handlers = []
    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=[
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
            ],
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(level)

    # GitPython logs every spawned command at DEBUG
    logging.getLogger("git").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """Get a structlog logger bound to a stdlib logger of the same name."""
    return structlog.get_logger(name)
