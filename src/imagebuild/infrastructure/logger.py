"""structlog setup for imagebuild: key-value console logs on stderr.

stdout is reserved for user-facing output (see output_channel), so every log
line, including tool stderr and crashes, goes to stderr. ``LOG_LEVEL`` filters
at the bound-logger level.
"""

from __future__ import annotations

import logging
import os
import sys
from types import TracebackType

import structlog


def setup_logging() -> structlog.typing.FilteringBoundLogger:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level, stream=sys.stderr, format="%(message)s")

    return structlog.get_logger("imagebuild")


logger: structlog.typing.FilteringBoundLogger = setup_logging()


def _log_crash(
    exc_type: type[BaseException],
    exc_value: BaseException,
    exc_traceback: TracebackType | None,
) -> None:
    # Ctrl-C keeps the default short traceback.
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logger.critical(
        "imagebuild crashed",
        error_type=exc_type.__name__,
        exc_info=(exc_type, exc_value, exc_traceback),
    )


sys.excepthook = _log_crash
