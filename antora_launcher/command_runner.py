"""Process execution seam shared by every launcher step."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, NoReturn, Sequence
import os
import shlex
import subprocess

EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127


@dataclass
class CommandResult:
    """Represents the outcome of an executed command."""

    command: Sequence[str]
    returncode: int
    stdout: str
    stderr: str
    streamed: bool = False


class CommandError(RuntimeError):
    """Raised when a command exits non-zero and the caller asked for ``check``."""

    def __init__(self, result: CommandResult):
        message = f"Command failed with exit code {result.returncode}: {format_command(result.command)}"
        if not result.streamed and (result.stdout or result.stderr):
            message = f"{message}\nstdout: {result.stdout}\nstderr: {result.stderr}"
        super().__init__(message)
        self.result = result

    @property
    def returncode(self) -> int:
        return self.result.returncode


class CommandLaunchError(RuntimeError):
    """Raised when a program cannot be started at all.

    ``returncode`` follows the shell: 127 for a missing program, 126 for one
    that exists but cannot be executed.
    """

    def __init__(self, command: Sequence[str], returncode: int, reason: str) -> None:
        super().__init__(f"{reason}: {command[0]}")
        self.command = list(command)
        self.returncode = returncode

    @classmethod
    def from_os_error(cls, command: Sequence[str], exc: OSError) -> "CommandLaunchError":
        if isinstance(exc, PermissionError):
            return cls(command, EXIT_NOT_EXECUTABLE, "Executable not permitted")
        return cls(command, EXIT_NOT_FOUND, "Executable not found")


def format_command(command: Sequence[str]) -> str:
    return " ".join(shlex.quote(str(part)) for part in command)


class CommandRunner:
    """Abstract command runner interface."""

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        check: bool = True,
        note: str | None = None,
        stream: bool = False,
    ) -> CommandResult:
        raise NotImplementedError

    def replace_process(self, command: Sequence[str], *, note: str | None = None) -> CommandResult:
        """Hand the current process over to ``command``.

        Real runners never return from this call. Runners that only record
        return a successful result so callers can report what would have run.
        """
        raise NotImplementedError

    def format_command(self, command: Sequence[str]) -> str:
        return format_command(command)


class SubprocessCommandRunner(CommandRunner):
    """Command runner that executes commands via :mod:`subprocess`.

    The child inherits the launcher's environment unchanged.
    """

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        check: bool = True,
        note: str | None = None,
        stream: bool = False,
    ) -> CommandResult:
        try:
            if stream:
                process = subprocess.run(
                    list(command),
                    cwd=str(cwd) if cwd else None,
                    check=False,
                )
                result = CommandResult(
                    command=command,
                    returncode=process.returncode,
                    stdout="",
                    stderr="",
                    streamed=True,
                )
            else:
                completed = subprocess.run(
                    list(command),
                    cwd=str(cwd) if cwd else None,
                    capture_output=True,
                    text=True,
                    check=False,
                )
                result = CommandResult(
                    command=command,
                    returncode=completed.returncode,
                    stdout=completed.stdout,
                    stderr=completed.stderr,
                )
        except (FileNotFoundError, PermissionError) as exc:
            if cwd is not None and exc.filename == str(cwd):
                raise
            raise CommandLaunchError.from_os_error(command, exc) from exc
        if check and result.returncode != 0:
            raise CommandError(result)
        return result

    def replace_process(self, command: Sequence[str], *, note: str | None = None) -> NoReturn:
        argv = [str(part) for part in command]
        try:
            os.execvp(argv[0], argv)
        except (FileNotFoundError, PermissionError) as exc:
            raise CommandLaunchError.from_os_error(argv, exc) from exc


@dataclass(slots=True)
class RecordedCommand:
    command: List[str]
    cwd: str | None
    note: str | None
    stream: bool
    replaces_process: bool = False


class RecordingCommandRunner(CommandRunner):
    """Command runner that records commands instead of executing them."""

    def __init__(self) -> None:
        self.commands: List[RecordedCommand] = []

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        check: bool = True,
        note: str | None = None,
        stream: bool = False,
    ) -> CommandResult:
        self.commands.append(
            RecordedCommand(
                command=list(command),
                cwd=str(cwd) if cwd else None,
                note=note,
                stream=stream,
            )
        )
        return CommandResult(command=command, returncode=0, stdout="", stderr="", streamed=stream)

    def replace_process(self, command: Sequence[str], *, note: str | None = None) -> CommandResult:
        self.commands.append(
            RecordedCommand(
                command=list(command),
                cwd=None,
                note=note,
                stream=True,
                replaces_process=True,
            )
        )
        return CommandResult(command=command, returncode=0, stdout="", stderr="", streamed=True)

    def iter_commands(self) -> Iterable[RecordedCommand]:
        return iter(self.commands)

    def iter_formatted(self) -> Iterable[str]:
        for record in self.commands:
            parts: List[str] = []
            if record.note:
                parts.append(record.note)
            if record.cwd:
                parts.append(f"(cwd={record.cwd})")
            if record.replaces_process:
                parts.append("exec")
            parts.append(self.format_command(record.command))
            yield " ".join(parts)


__all__ = [
    "CommandError",
    "CommandLaunchError",
    "CommandResult",
    "CommandRunner",
    "EXIT_NOT_EXECUTABLE",
    "EXIT_NOT_FOUND",
    "RecordedCommand",
    "RecordingCommandRunner",
    "SubprocessCommandRunner",
    "format_command",
]
