from typing import Any

from ruby_activation.const import DEFAULT_RUBY_EXECUTABLE, VersionManagerIdentifier
from ruby_activation.data import ActivationResult, CommandOutput
from ruby_activation.exceptions import MissingConfigurationError

from .base import VersionManager, merge_environment


class CustomVersionManager(VersionManager):
    r"""Activation through a user-defined shell snippet.

    For setups no built-in variant covers: the snippet runs in the same shell
    line before Ruby, so it can change PATH, GEM_HOME and GEM_PATH as needed
    to find the right runtime.
    """

    identifier = VersionManagerIdentifier.CUSTOM

    async def activate(self) -> ActivationResult:
        """Run the snippet, probe Ruby and layer its environment over the ambient one."""
        payload = await self._run_env_activation_script(DEFAULT_RUBY_EXECUTABLE)
        return self._build_result(payload, merge_environment(self.ambient_env, payload.env))

    async def run_activated_script(self, command: str, **options: Any) -> CommandOutput:
        """Run a command after the custom activation snippet."""
        return await self.run_script(f"{self.custom_command()} && {command}", **options)

    def custom_command(self) -> str:
        """Get the configured activation snippet."""
        command = self.config.custom_ruby_command
        if not command or not command.strip():
            raise MissingConfigurationError("customRubyCommand", str(self.identifier))
        return command
