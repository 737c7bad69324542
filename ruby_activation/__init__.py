"""Ruby activation - discover and normalize a Ruby environment before booting the language server."""

from .const import ACTIVATION_SEPARATOR, VersionManagerIdentifier
from .core.config import ActivationConfig, VersionManagerConfig
from .data import ActivationResult, CommandOutput, ShellCommand
from .exceptions import (
    ActivationError,
    ActivationScriptError,
    CommandEmptyError,
    CommandFailedError,
    MissingConfigurationError,
    UnsupportedVersionManagerError,
)
from .path_converter import ContainerPathConverter
from .shell import ShellRunner
from .version_managers import (
    ComposeVersionManager,
    CustomVersionManager,
    NoneVersionManager,
    VersionManager,
    VersionManagerFactory,
    create_version_manager,
)

__all__ = [
    "ACTIVATION_SEPARATOR",
    "ActivationConfig",
    "ActivationError",
    "ActivationResult",
    "ActivationScriptError",
    "CommandEmptyError",
    "CommandFailedError",
    "CommandOutput",
    "ComposeVersionManager",
    "ContainerPathConverter",
    "CustomVersionManager",
    "MissingConfigurationError",
    "NoneVersionManager",
    "ShellCommand",
    "ShellRunner",
    "UnsupportedVersionManagerError",
    "VersionManager",
    "VersionManagerConfig",
    "VersionManagerFactory",
    "VersionManagerIdentifier",
    "create_version_manager",
]
