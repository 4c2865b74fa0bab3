"""Credential setup, extension install and generator invocation."""
from __future__ import annotations

from typing import Mapping, Sequence

from .command_runner import CommandError, CommandRunner
from .config import (
    BuildConfig,
    CredentialKind,
    CredentialSource,
    resolve_config,
    resolve_credentials,
    resolve_extensions,
)
from .console import Console
from .credentials import CredentialStore
from .errors import ConfigurationError

HELP_FLAG = "--help"


class BuildLauncher:
    def __init__(
        self,
        *,
        runner: CommandRunner,
        console: Console,
        store: CredentialStore,
        generator: str = "antora",
        package_manager: str = "npm",
        dry_run: bool = False,
    ) -> None:
        self._runner = runner
        self._console = console
        self._store = store
        self._generator = generator
        self._package_manager = package_manager
        self._dry_run = dry_run

    def run(self, args: Sequence[str], env: Mapping[str, str]) -> int:
        """Run the launcher and return the exit code to report.

        Arguments other than a lone ``--help`` are handed straight to the
        generator, skipping every setup step.
        """

        args = list(args)
        if args and args[0] != HELP_FLAG:
            return self.passthrough(args)

        config = resolve_config(env)
        try:
            self.check_working_directory(config)
        except ConfigurationError as exc:
            self._console.error("build", str(exc))
            return exc.exit_code

        try:
            self.setup_credentials(resolve_credentials(env))
        except ConfigurationError as exc:
            self._console.error("credentials", str(exc))
            return exc.exit_code
        except CommandError as exc:
            self._console.error("credentials", f"git exited with code {exc.returncode}")
            return exc.returncode

        try:
            self.install_extensions(resolve_extensions(env))
        except CommandError as exc:
            self._console.error("extensions", f"{self._package_manager} exited with code {exc.returncode}")
            return exc.returncode

        return self.run_build(config)

    def passthrough(self, args: Sequence[str]) -> int:
        result = self._runner.replace_process([self._generator, *args], note="Run generator")
        return result.returncode

    def check_working_directory(self, config: BuildConfig) -> None:
        # Dry runs may plan for a workspace that only exists on the CI runner.
        if self._dry_run or config.working_directory is None:
            return
        if not config.working_directory.is_dir():
            raise ConfigurationError(
                f"Working directory not found: {config.working_directory}",
                path=config.working_directory,
            )

    def setup_credentials(self, source: CredentialSource) -> bool:
        """Materialize ``source`` into the credential store.

        Returns whether the store was written and registered.
        """

        if source.kind is CredentialKind.NONE:
            self._console.info("credentials", "No credentials provided (public repos only)")
            return False

        if source.kind is CredentialKind.FILE:
            self._console.info("credentials", f"Using credentials file: {source.path}")
            self._store.require_source(source.path)
        elif source.kind is CredentialKind.BLOB:
            self._console.info("credentials", "Using GIT_CREDENTIALS environment variable")
        else:
            self._console.info("credentials", "Using GITHUB_TOKEN")

        if self._dry_run:
            self._console.dry(f"write credentials store {self._store.path} (mode 600)")
        else:
            if source.kind is CredentialKind.FILE:
                self._store.copy_from(source.path)
            elif source.kind is CredentialKind.BLOB:
                self._store.write(source.value or "")
            else:
                self._store.write(source.credential_line())
            self._store.ensure_private()

        self._console.debug("credentials", f"Registering credential store {self._store.path}")
        self._store.register_helper(self._runner)
        return True

    def install_extensions(self, extensions: Sequence[str]) -> None:
        if not extensions:
            return
        self._console.info("extensions", f"Installing: {' '.join(extensions)}")
        self._runner.run(
            [self._package_manager, "install", "-g", *extensions],
            note="Install extensions",
            stream=True,
        )

    def run_build(self, config: BuildConfig) -> int:
        command = [self._generator, *config.arguments()]
        if config.working_directory is not None:
            self._console.debug("build", f"Working directory: {config.working_directory}")
        self._console.info("build", f"Running: {self._runner.format_command(command)}")
        result = self._runner.run(
            command,
            cwd=config.working_directory,
            check=False,
            note="Build site",
            stream=True,
        )
        return result.returncode
