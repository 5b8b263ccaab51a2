"""Structured diagnostics for cf-tunnel-buddy, built on structlog.

Log lines are for troubleshooting only. The interactive UI owns stdout, so
the console handler writes to stderr and stays quiet below WARNING unless
``--verbose`` raises the level.
"""

import logging
import sys

import structlog
from structlog.typing import Processor

FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _processors(json_format: bool) -> list[Processor]:
    """Processor chain shared by the console and file output."""
    chain: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if json_format:
        chain.append(structlog.processors.JSONRenderer())
    else:
        # Plain text so escape codes never leak into redirected stderr
        chain.append(structlog.dev.ConsoleRenderer(colors=False))
    return chain


def _attach(
    root: logging.Logger, handler: logging.Handler, level: int, fmt: str
) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)


def setup_logging(
    level: str = "WARNING",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """Route structlog events through the standard library root logger.

    Calling it again replaces the handlers from the previous call.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Render events as JSON instead of key=value text
        log_file: Also append log lines to this file
    """
    log_level = getattr(logging, level.upper())

    root = logging.getLogger()
    root.handlers = []
    root.setLevel(log_level)
    _attach(root, logging.StreamHandler(sys.stderr), log_level, "%(message)s")
    if log_file:
        _attach(root, logging.FileHandler(log_file), log_level, FILE_LOG_FORMAT)

    structlog.configure(
        processors=_processors(json_format),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger named after the calling module."""
    return structlog.get_logger(name)  # type: ignore[no-any-return]
