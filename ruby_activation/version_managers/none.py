from ruby_activation.const import VersionManagerIdentifier
from ruby_activation.data import ActivationResult

from .base import VersionManager, merge_environment


class NoneVersionManager(VersionManager):
    r"""Activation for a Ruby that is already on the PATH.

    No version manager is involved, but the interpreter's environment still
    has to be captured for the language server. This covers Ruby installed
    through a system package manager, or an editor already attached to the
    container Ruby runs in.
    """

    identifier = VersionManagerIdentifier.NONE

    async def activate(self) -> ActivationResult:
        """Probe ``rubyPath`` and layer its environment over the ambient one."""
        payload = await self._run_env_activation_script(self.config.ruby_path)
        return self._build_result(payload, merge_environment(self.ambient_env, payload.env))
