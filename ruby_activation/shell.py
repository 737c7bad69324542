"""Shell command execution for activation commands.

Commands run through the user's login shell so that version manager hooks
sourced from shell configuration files are in effect. Output is captured in
full; a non-zero exit status is raised as ``CommandFailedError``.
"""

import asyncio
import json
import logging
import re
import shlex
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ruby_activation.data import CommandOutput, ShellCommand
from ruby_activation.exceptions import CommandEmptyError, CommandFailedError

ENV_ASSIGNMENT_PATTERN = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)=(.*)$", re.DOTALL)


def shell_escape(value: str) -> str:
    """Quote a value for a POSIX shell.

    Wraps the value in single quotes and replaces each embedded single quote
    with ``'\\''`` (close quote, escaped quote, reopen quote).
    """
    return "'" + value.replace("'", "'\\''") + "'"


def parse_command(command: str) -> ShellCommand:
    """Split a command line into an executable, its arguments and leading env assignments.

    Args:
        command: A command line such as ``FOO=1 docker compose run web``.

    Returns:
        ShellCommand: ``FOO=1`` lands in ``options["env"]``, ``docker`` is the
            executable and the remaining tokens are its arguments.

    Raises:
        CommandEmptyError: If the command line has no executable.

    """
    tokens = shlex.split(command)
    env: dict[str, str] = {}

    while tokens and (match := ENV_ASSIGNMENT_PATTERN.match(tokens[0])):
        env[match.group(1)] = match.group(2)
        tokens.pop(0)

    if not tokens:
        raise CommandEmptyError

    return ShellCommand(command=tokens[0], args=tokens[1:], options={"env": env} if env else {})


class ShellRunner:
    """Runs command lines in a fixed working directory using the user's shell."""

    def __init__(
        self,
        cwd: str | Path,
        *,
        user_shell: str | None = None,
        env: Mapping[str, str] | None = None,
        platform: str = sys.platform,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            cwd: Directory every command runs in unless overridden per call.
            user_shell: The shell reported by the user's editor environment.
            env: Environment for spawned commands. If None, the child inherits
                the current process environment.
            platform: Host platform identifier, as in ``sys.platform``.
            logger: Logger for command diagnostics.

        """
        self.cwd = Path(cwd)
        self.user_shell = user_shell
        self.env = env
        self.platform = platform
        self.logger: logging.Logger = logger or logging.getLogger(__name__)

    @property
    def shell(self) -> str | None:
        """Get the shell commands should run in.

        The user's shell is preferred because version manager scripts are
        usually sourced from its configuration files. On Windows no shell is
        chosen so that commands run on ``cmd.exe`` rather than PowerShell,
        which would need different quoting.
        """
        if self.user_shell and not self.platform.startswith("win"):
            return self.user_shell
        return None

    async def run(self, command: str, **options: Any) -> CommandOutput:
        """Run a command line and capture its output.

        Args:
            command: The command line, interpreted by the shell.
            **options: Per-call overrides: ``cwd``, ``env``, ``shell`` and
                ``input`` (text written to stdin). Anything else is passed to
                ``asyncio.create_subprocess_shell``.

        Returns:
            CommandOutput: Exit code with decoded stdout and stderr.

        Raises:
            CommandFailedError: If the command exits with a non-zero status.

        """
        cwd = options.pop("cwd", self.cwd)
        env = options.pop("env", self.env)
        shell = options.pop("shell", self.shell)
        input_data: str | None = options.pop("input", None)

        self.logger.info(f"Running command: `{command}` in {cwd} using shell: {shell}")
        self.logger.debug(f"Environment used for command: {json.dumps(dict(env) if env is not None else None)}")

        process = await asyncio.create_subprocess_shell(
            command,
            cwd=str(cwd),
            env=dict(env) if env is not None else None,
            executable=shell,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            **options,
        )
        stdout_data, stderr_data = await process.communicate(input_data.encode("utf-8") if input_data else None)

        output = CommandOutput(
            exit_code=process.returncode or 0,
            stdout=stdout_data.decode("utf-8", errors="replace"),
            stderr=stderr_data.decode("utf-8", errors="replace"),
        )
        if not output.success:
            raise CommandFailedError(command, output.exit_code, output.stdout, output.stderr)

        return output
