"""Tagged console output with a configurable verbosity level."""
from __future__ import annotations

from typing import TextIO
import sys


class Console:
    """Writes ``[tag] message`` lines.

    Levels: none < error < info < debug
    Default: 'info'
    """

    LEVELS = {
        "none": 0,
        "error": 1,
        "info": 2,
        "debug": 3,
    }

    def __init__(
        self,
        level: str = "info",
        *,
        stream: TextIO | None = None,
        error_stream: TextIO | None = None,
    ) -> None:
        self.level_name = level if level in self.LEVELS else "info"
        self.level = self.LEVELS[self.level_name]
        self._stream = stream
        self._error_stream = error_stream

    # Resolved lazily so redirected sys.stdout/sys.stderr are honoured.
    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    @property
    def error_stream(self) -> TextIO:
        return self._error_stream or sys.stderr

    def info(self, tag: str, message: str) -> None:
        if self.level >= self.LEVELS["info"]:
            print(f"[{tag}] {message}", file=self.stream, flush=True)

    def error(self, tag: str, message: str) -> None:
        if self.level >= self.LEVELS["error"]:
            print(f"[{tag}] ERROR: {message}", file=self.error_stream, flush=True)

    def debug(self, tag: str, message: str) -> None:
        if self.level >= self.LEVELS["debug"]:
            print(f"[{tag}] {message}", file=self.stream, flush=True)

    def dry(self, message: str) -> None:
        print(f"[dry-run] {message}", file=self.stream, flush=True)
