"""Data classes for Ruby environment activation."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ActivationResult:
    """Normalized description of an activated Ruby environment.

    Consumed by the caller to boot the language server with the right
    environment. Every field is populated after a successful activation.
    """

    env: dict[str, str]
    yjit: bool
    version: str
    gem_path: list[str]


@dataclass
class ShellCommand:
    """An executable plus its arguments, ready to be spawned."""

    command: str
    args: list[str] = field(default_factory=list)
    options: dict[str, Any] = field(default_factory=dict)

    @property
    def argv(self) -> list[str]:
        """Get the full argument vector, executable first."""
        return [self.command, *self.args]


@dataclass
class CommandOutput:
    """Captured output of a shell command."""

    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        """Check if the command exited successfully."""
        return not self.exit_code
