"""Output channel backed by stdout and the structured logger."""

from __future__ import annotations

import sys
from typing import TextIO

from imagebuild.infrastructure.logger import logger


class LogOutputChannel:
    """User-facing lines go to ``stream``; error text also goes through structlog."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdout

    def info(self, message: str, scope: str | None = None) -> None:
        prefix = f"[{scope}] " if scope else ""
        print(f"{prefix}{message}", file=self._stream, flush=True)
        logger.debug("Output", scope=scope, message=message)

    def error(self, message: str, scope: str | None = None) -> None:
        logger.error("Tool output", scope=scope, output=message.rstrip())
