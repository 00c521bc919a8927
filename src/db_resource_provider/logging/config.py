"""Structured logging for the resource provider.

Every entry carries the service name, data source and root path of the
provider that wrote it, so several providers in one process can be told
apart. Modules log through ``structlog.get_logger(__name__)``; this module
only routes those loggers through stdlib logging.
"""

import logging
import sys
from typing import TextIO

import structlog
from structlog.types import Processor

from ..config import Settings


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(sort_keys=False)
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(settings: Settings, stream: TextIO | None = None) -> None:
    """Configure structlog from settings.

    Args:
        settings: Supplies log level, format and the context bound to every entry.
        stream: Where log lines are written. Defaults to stderr so command
            output on stdout stays parseable.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stderr,
        level=getattr(logging, settings.log_level),
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=False),
            structlog.processors.format_exc_info,
            _renderer(settings.log_format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )

    structlog.contextvars.bind_contextvars(
        service=settings.service_name,
        datasource=settings.datasource_name,
        root_path=settings.root_path,
    )
