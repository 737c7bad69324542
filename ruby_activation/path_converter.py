"""Host and container path translation for compose workspaces."""

import asyncio
import logging
from collections.abc import Mapping
from pathlib import Path, PurePath, PurePosixPath
from types import MappingProxyType


async def build_path_mapping(
    raw_mapping: Mapping[str, str],
    base_dir: str | Path,
    logger: logging.Logger | None = None,
) -> dict[str, str]:
    """Keep only the mapping entries whose local side is an existing directory.

    Local paths are resolved against ``base_dir``. All candidate paths are
    checked concurrently; entries that do not exist or are not directories
    are logged and dropped.

    Args:
        raw_mapping: Local path to in-container path, as declared by compose.
        base_dir: Directory relative local paths are resolved against.
        logger: Logger for dropped entries.

    Returns:
        dict[str, str]: Absolute local path to in-container path.

    """
    logger = logger or logging.getLogger(__name__)
    candidates = [(Path(base_dir, local).resolve(), remote) for local, remote in raw_mapping.items()]

    is_directory = await asyncio.gather(*(asyncio.to_thread(local.is_dir) for local, _ in candidates))

    path_mapping: dict[str, str] = {}
    for (local, remote), exists in zip(candidates, is_directory, strict=True):
        if not exists:
            logger.debug(f"Skipping path mapping {local} -> {remote}: not an existing directory")
            continue
        path_mapping[str(local)] = remote

    return path_mapping


def _substitute_prefix(
    path: PurePath,
    rules: list[tuple[PurePath, PurePath]],
) -> PurePath | None:
    for source, target in rules:
        if path == source or source in path.parents:
            return target.joinpath(*path.relative_to(source).parts)
    return None


class ContainerPathConverter:
    """Translates paths between the host and a compose service's container.

    Each mapping entry is a prefix substitution rule; the longest matching
    root wins. Paths under no mapped root are returned unchanged.
    """

    def __init__(self, path_mapping: Mapping[str, str], logger: logging.Logger | None = None) -> None:
        """Initialize the converter with an already filtered mapping."""
        self._path_mapping = MappingProxyType(dict(path_mapping))
        self.logger: logging.Logger = logger or logging.getLogger(__name__)

        rules = [(PurePath(local), PurePosixPath(remote)) for local, remote in self._path_mapping.items()]
        self._to_remote_rules: list[tuple[PurePath, PurePath]] = sorted(
            rules, key=lambda rule: len(rule[0].parts), reverse=True
        )
        self._to_local_rules: list[tuple[PurePath, PurePath]] = sorted(
            ((remote, local) for local, remote in rules), key=lambda rule: len(rule[0].parts), reverse=True
        )

    @property
    def path_mapping(self) -> Mapping[str, str]:
        """Get a read-only view of the local to remote mapping."""
        return self._path_mapping

    def to_remote(self, local_path: str | Path) -> str:
        """Convert a host path to its in-container counterpart."""
        converted = _substitute_prefix(PurePath(local_path), self._to_remote_rules)
        if converted is None:
            self.logger.debug(f"No container mapping for {local_path}")
            return str(local_path)
        return converted.as_posix()

    def to_local(self, remote_path: str) -> str:
        """Convert an in-container path to its host counterpart."""
        converted = _substitute_prefix(PurePosixPath(remote_path), self._to_local_rules)
        if converted is None:
            self.logger.debug(f"No host mapping for {remote_path}")
            return remote_path
        return str(converted)
