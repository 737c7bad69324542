import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, ClassVar

from ruby_activation.const import VersionManagerIdentifier
from ruby_activation.core.config import ActivationConfig
from ruby_activation.exceptions import UnsupportedVersionManagerError

from .base import VersionManager
from .compose import ComposeVersionManager
from .custom import CustomVersionManager
from .none import NoneVersionManager


class VersionManagerFactory:
    """Factory for creating version managers."""

    _managers: ClassVar[dict[str, type[VersionManager]]] = {
        str(VersionManagerIdentifier.NONE): NoneVersionManager,
        str(VersionManagerIdentifier.COMPOSE): ComposeVersionManager,
        str(VersionManagerIdentifier.CUSTOM): CustomVersionManager,
    }

    @classmethod
    def create(
        cls,
        workspace_folder: str | Path,
        config: ActivationConfig | None = None,
        **kwargs: Any,
    ) -> VersionManager:
        """Create the version manager selected by ``config``."""
        config = config or ActivationConfig()
        identifier = str(config.version_manager.identifier).lower()
        if identifier not in cls._managers:
            raise UnsupportedVersionManagerError(identifier)

        manager_class = cls._managers[identifier]
        if not issubclass(manager_class, VersionManager):
            msg = f"Version manager class {manager_class} is not a subclass of VersionManager"
            raise TypeError(msg)

        return manager_class(workspace_folder, config, **kwargs)

    @classmethod
    def get_supported_identifiers(cls) -> list[str]:
        """Get list of supported version manager identifiers."""
        return list(cls._managers.keys())

    @classmethod
    def register(cls, identifier: str, manager_class: type[VersionManager]) -> None:
        """Register a new version manager."""
        cls._managers[identifier.lower()] = manager_class


def create_version_manager(
    workspace_folder: str | Path,
    settings: Mapping[str, Any] | ActivationConfig | None = None,
    *,
    logger: logging.Logger | None = None,
    **kwargs: Any,
) -> VersionManager:
    r"""Create a version manager for a workspace from the editor's settings.

    The ambient environment and the user's shell default to the current
    process environment and its ``SHELL`` variable.

    Args:
        workspace_folder: Root of the workspace being activated.
        settings: Either an ``ActivationConfig`` or the raw settings mapping
            (``{"versionManager": {"identifier": "compose", "composeService": "web"}}``).
        logger: Logger for activation diagnostics.
        **kwargs: Passed to the version manager constructor (``ambient_env``,
            ``user_shell``, ``platform``, ``runner``).

    Returns:
        VersionManager: The selected version manager.

    Example:
        >>> manager = create_version_manager("/path/to/app", {"versionManager.identifier": "none"})
        >>> result = asyncio.run(manager.activate())
        >>> result.version
        '3.3.0'

    """
    config = settings if isinstance(settings, ActivationConfig) else ActivationConfig.from_settings(settings)
    kwargs.setdefault("ambient_env", dict(os.environ))
    kwargs.setdefault("user_shell", os.environ.get("SHELL"))
    return VersionManagerFactory.create(workspace_folder, config, logger=logger, **kwargs)
