import logging
import os
import sys
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any, ClassVar

from ruby_activation.activation import ActivationPayload, build_activation_command, load_activation_payload
from ruby_activation.core.config import ActivationConfig
from ruby_activation.data import ActivationResult, CommandOutput, ShellCommand
from ruby_activation.exceptions import CommandEmptyError
from ruby_activation.shell import ShellRunner


def merge_environment(ambient: Mapping[str, str], activated: Mapping[str, str]) -> dict[str, str]:
    """Layer the activated environment over a copy of the ambient one.

    Variables reported by the interpreter win over ambient variables of the
    same name; every other ambient variable is kept.
    """
    return {**ambient, **activated}


class VersionManager(ABC):
    """Abstract base class for the ways of reaching a Ruby interpreter.

    A version manager knows how to turn "run this command with Ruby activated"
    into a concrete shell invocation and how to turn the probe output into an
    ``ActivationResult``. Commands run in the directory of the bundle's
    Gemfile.
    """

    identifier: ClassVar[str]

    def __init__(
        self,
        workspace_folder: str | Path,
        config: ActivationConfig | None = None,
        *,
        ambient_env: Mapping[str, str] | None = None,
        user_shell: str | None = None,
        platform: str = sys.platform,
        runner: ShellRunner | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the version manager.

        Args:
            workspace_folder: Root of the workspace being activated.
            config: Activation settings. Defaults are used when None.
            ambient_env: The environment the language server would otherwise
                inherit. A snapshot of ``os.environ`` is taken when None.
            user_shell: The shell reported by the user's editor environment.
            platform: Host platform identifier, as in ``sys.platform``.
            runner: Runs the shell commands. Built for the bundle directory when None.
            logger: Logger for activation diagnostics.

        """
        self.workspace_folder = Path(workspace_folder)
        self.config = config or ActivationConfig()
        self.logger: logging.Logger = logger or logging.getLogger(__name__)
        self.ambient_env: dict[str, str] = dict(os.environ if ambient_env is None else ambient_env)

        if self.config.verbose and not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.DEBUG)

        self.bundle_dir = self._resolve_bundle_dir()
        self.runner = runner or ShellRunner(
            self.bundle_dir,
            user_shell=user_shell,
            env=self.ambient_env,
            platform=platform,
            logger=self.logger,
        )

    def _resolve_bundle_dir(self) -> Path:
        """Get the directory of the custom Gemfile, or the workspace root without one."""
        custom_gemfile = self.config.bundle_gemfile
        if not custom_gemfile:
            return self.workspace_folder

        gemfile = Path(custom_gemfile)
        if not gemfile.is_absolute():
            gemfile = (self.workspace_folder / gemfile).resolve()
        return gemfile.parent

    @abstractmethod
    async def activate(self) -> ActivationResult:
        """Activate the Ruby environment, returning what is needed to boot the language server."""

    async def run_activated_script(self, command: str, **options: Any) -> CommandOutput:
        """Run a command with Ruby activated."""
        return await self.run_script(command, **options)

    def build_executable(self, command: list[str]) -> ShellCommand:
        """Build the executable that launches ``command`` with Ruby activated."""
        if not command:
            raise CommandEmptyError
        return ShellCommand(command=command[0], args=list(command[1:]))

    async def run_script(self, command: str, **options: Any) -> CommandOutput:
        """Run a command in the bundle directory using the user's shell."""
        return await self.runner.run(command, **options)

    async def _run_env_activation_script(self, activated_ruby: str) -> ActivationPayload:
        result = await self.run_activated_script(build_activation_command(activated_ruby))
        return load_activation_payload(result.stderr, self.logger)

    @staticmethod
    def _build_result(payload: ActivationPayload, env: dict[str, str]) -> ActivationResult:
        return ActivationResult(
            env=env,
            yjit=payload.yjit,
            version=payload.version,
            gem_path=list(payload.gem_path),
        )
