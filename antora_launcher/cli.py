"""Command line entry point for the Antora launcher."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping
import os
import sys

from .command_runner import CommandLaunchError, CommandRunner, RecordingCommandRunner, SubprocessCommandRunner
from .config import resolve_settings
from .console import Console
from .credentials import CredentialStore
from .launcher import BuildLauncher


def _emit_dry_run_output(runner: RecordingCommandRunner, console: Console) -> None:
    for line in runner.iter_formatted():
        console.dry(line)


def main(
    argv: Iterable[str] | None = None,
    env: Mapping[str, str] | None = None,
    *,
    home: Path | None = None,
) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    environ = dict(os.environ if env is None else env)
    settings = resolve_settings(environ)
    console = Console(settings.console_level)

    runner: CommandRunner
    if settings.dry_run:
        runner = RecordingCommandRunner()
    else:
        runner = SubprocessCommandRunner()

    launcher = BuildLauncher(
        runner=runner,
        console=console,
        store=CredentialStore(home or Path.home()),
        dry_run=settings.dry_run,
    )
    try:
        code = launcher.run(args, environ)
    except CommandLaunchError as exc:
        console.error("launcher", str(exc))
        return exc.returncode

    if isinstance(runner, RecordingCommandRunner):
        _emit_dry_run_output(runner, console)
    return code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
