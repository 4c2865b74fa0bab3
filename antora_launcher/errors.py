"""Exception types raised by the launcher."""
from __future__ import annotations

from pathlib import Path


class LauncherError(Exception):
    """Base class for failures detected by the launcher itself."""

    exit_code = 1


class ConfigurationError(LauncherError):
    """Raised when the supplied configuration cannot be honoured."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path
