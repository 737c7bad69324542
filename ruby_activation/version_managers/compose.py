import json
from pathlib import Path
from typing import Any

from ruby_activation.const import (
    COMPOSE_CONFIG_FLAGS,
    COMPOSE_RUN_FLAGS,
    DEFAULT_COMPOSE_COMMAND,
    DEFAULT_RUBY_EXECUTABLE,
    VersionManagerIdentifier,
)
from ruby_activation.data import ActivationResult, CommandOutput, ShellCommand
from ruby_activation.exceptions import CommandEmptyError, MissingConfigurationError
from ruby_activation.path_converter import ContainerPathConverter, build_path_mapping
from ruby_activation.shell import parse_command, shell_escape

from .base import VersionManager


def parse_short_volume(entry: str) -> dict[str, str]:
    """Split a "SOURCE:TARGET[:MODE]" volume into its source and target.

    Splits from the right since the source may itself contain a colon
    (a Windows drive such as "C:\\src"), while the in-container target is
    always an absolute POSIX path.
    """
    head, sep, tail = entry.rpartition(":")
    if sep and not tail.startswith("/"):
        entry = head

    source, sep, target = entry.rpartition(":")
    if not sep:
        return {"target": entry}
    return {"source": source, "target": target}


class ComposeVersionManager(VersionManager):
    r"""Activation for a Ruby that lives in a compose service.

    Every command, the activation probe included, runs as a one-off container
    of the configured service: removed afterwards, without starting dependent
    services, with stdin attached and no TTY.

    The language server itself runs on the host through the same run prefix,
    so the activation result carries the host environment.
    """

    identifier = VersionManagerIdentifier.COMPOSE

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        """Initialize the compose version manager."""
        super().__init__(*args, **kwargs)
        self._path_converters: dict[Path, ContainerPathConverter] = {}

    async def activate(self) -> ActivationResult:
        """Probe Ruby inside the compose service."""
        payload = await self._run_env_activation_script(DEFAULT_RUBY_EXECUTABLE)
        return self._build_result(payload, dict(self.ambient_env))

    async def run_activated_script(self, command: str, **options: Any) -> CommandOutput:
        """Run a command inside a one-off container of the service."""
        return await self.run_script(f"{self.compose_run_command()} {self.compose_service_name()} {command}", **options)

    def build_executable(self, command: list[str]) -> ShellCommand:
        """Build an executable that runs ``command`` inside the service.

        The command is shell-escaped into one string and handed to ``sh -c``
        in the container, so tokens with spaces or quotes survive intact.
        """
        if not command:
            raise CommandEmptyError

        compose = parse_command(f"{self.compose_run_command()} {self.compose_service_name()}")
        script = " ".join(shell_escape(token) for token in command)
        return ShellCommand(
            command=compose.command,
            args=[*compose.args, "sh", "-c", script],
            options=compose.options,
        )

    def activate_executable(self, executable: ShellCommand) -> ShellCommand:
        """Wrap an already built executable so it runs inside the service.

        Environment assignments in a custom compose command are merged into
        the executable's own environment.
        """
        compose = parse_command(f"{self.compose_run_command()} {self.compose_service_name()}")
        options = dict(executable.options)
        options["env"] = {**options.get("env", {}), **compose.options.get("env", {})}
        return ShellCommand(
            command=compose.command,
            args=[*compose.args, *executable.argv],
            options=options,
        )

    async def build_path_converter(self, workspace_folder: str | Path | None = None) -> ContainerPathConverter:
        """Build the host to container path converter for the service.

        Built once per workspace folder; later calls for the same folder
        return the same converter.

        Reads the resolved compose configuration, takes the bind mounts
        declared for the service and keeps those whose host side is an
        existing directory.
        """
        service_name = self.compose_service_name()
        base_dir = Path(workspace_folder if workspace_folder is not None else self.workspace_folder).resolve()
        if base_dir in self._path_converters:
            return self._path_converters[base_dir]

        result = await self.run_script(f"{self.compose_command()} {COMPOSE_CONFIG_FLAGS}")
        compose_config = json.loads(result.stdout)
        service = compose_config.get("services", {}).get(service_name, {})

        raw_mapping: dict[str, str] = {}
        for entry in service.get("volumes", []):
            volume = parse_short_volume(entry) if isinstance(entry, str) else entry
            if volume.get("type", "bind") != "bind" or "source" not in volume or "target" not in volume:
                self.logger.debug(f"Skipping volume without a host path: {volume}")
                continue
            raw_mapping[volume["source"]] = volume["target"]

        path_mapping = await build_path_mapping(raw_mapping, base_dir, self.logger)
        converter = ContainerPathConverter(path_mapping, self.logger)
        self._path_converters[base_dir] = converter
        return converter

    def compose_run_command(self) -> str:
        """Get the compose invocation that starts a one-off container."""
        return f"{self.compose_command()} {COMPOSE_RUN_FLAGS}"

    def compose_service_name(self) -> str:
        """Get the configured compose service."""
        service = self.config.version_manager.compose_service
        if service is None:
            raise MissingConfigurationError("composeService", str(self.identifier))
        return service

    def compose_command(self) -> str:
        """Get the compose command, honoring ``composeCustomCommand``."""
        return self.config.version_manager.compose_custom_command or DEFAULT_COMPOSE_COMMAND
