"""Git credential store file handling."""
from __future__ import annotations

from pathlib import Path
from typing import List
import os
import stat

from .command_runner import CommandResult, CommandRunner
from .errors import ConfigurationError

STORE_FILENAME = ".git-credentials"
PRIVATE_MODE = 0o600


class CredentialStore:
    """The ``.git-credentials`` file read by ``git credential-store``.

    ``home`` is injectable so tests never touch the real home directory.
    """

    def __init__(self, home: Path) -> None:
        self._home = Path(home)

    @property
    def path(self) -> Path:
        return self._home / STORE_FILENAME

    def exists(self) -> bool:
        return self.path.is_file()

    def write(self, content: str) -> Path:
        """Write ``content`` as a newline-terminated store file."""

        if not content.endswith("\n"):
            content = f"{content}\n"
        return self.write_bytes(content.encode("utf-8"))

    def write_bytes(self, data: bytes) -> Path:
        """Write ``data`` verbatim to the store file with owner-only permissions.

        The file is opened with mode 0600 and then chmod-ed, so a file left
        behind by an earlier run with looser permissions is tightened before
        any credential bytes reach it.
        """

        self._home.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, PRIVATE_MODE)
        try:
            os.fchmod(fd, PRIVATE_MODE)
            with os.fdopen(fd, "wb") as handle:
                fd = -1
                handle.write(data)
        finally:
            if fd != -1:
                os.close(fd)
        return self.path

    @staticmethod
    def require_source(source: Path) -> Path:
        if not source.is_file():
            raise ConfigurationError(f"Credentials file not found: {source}", path=source)
        return source

    def copy_from(self, source: Path) -> Path:
        """Copy ``source`` byte for byte; its permissions are not carried over."""

        return self.write_bytes(self.require_source(source).read_bytes())

    def ensure_private(self) -> None:
        try:
            mode = stat.S_IMODE(self.path.stat().st_mode)
        except FileNotFoundError as exc:
            raise ConfigurationError(f"Credentials store missing: {self.path}", path=self.path) from exc
        if mode & (stat.S_IRWXG | stat.S_IRWXO):
            raise ConfigurationError(
                f"Credentials store {self.path} has permissions {mode:o}; expected {PRIVATE_MODE:o}",
                path=self.path,
            )

    def helper_command(self) -> List[str]:
        return ["git", "config", "--global", "credential.helper", f"store --file={self.path}"]

    def register_helper(self, runner: CommandRunner) -> CommandResult:
        """Point git's global credential helper at this store."""

        return runner.run(self.helper_command(), note="Register credential helper")
