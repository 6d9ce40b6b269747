"""Console notifier: messages on the terminal, yes/no questions on stdin."""

from __future__ import annotations

import asyncio
import sys
from typing import Callable, TextIO

_YES = {"y", "yes"}


class ConsoleNotifier:
    def __init__(
        self,
        stream: TextIO | None = None,
        read_line: Callable[[str], str] = input,
        interactive: bool | None = None,
    ) -> None:
        self._stream = stream or sys.stderr
        self._read_line = read_line
        self._interactive = sys.stdin.isatty() if interactive is None else interactive

    async def confirm(self, message: str, action_label: str) -> bool:
        """Ask a yes/no question. Non-interactive sessions always answer no."""
        if not self._interactive:
            self.show_info(f"{message} (skipped: not an interactive terminal)")
            return False
        try:
            answer = await asyncio.to_thread(self._read_line, f"{message} {action_label}? [y/N] ")
        except EOFError:
            return False
        return answer.strip().lower() in _YES

    def show_info(self, message: str) -> None:
        print(message, file=self._stream, flush=True)

    def show_error(self, message: str) -> None:
        print(f"error: {message}", file=self._stream, flush=True)
