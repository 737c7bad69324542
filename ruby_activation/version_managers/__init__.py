"""Version managers for Ruby environment activation."""

from .base import VersionManager, merge_environment
from .compose import ComposeVersionManager
from .custom import CustomVersionManager
from .factory import VersionManagerFactory, create_version_manager
from .none import NoneVersionManager

__all__ = [
    "ComposeVersionManager",
    "CustomVersionManager",
    "NoneVersionManager",
    "VersionManager",
    "VersionManagerFactory",
    "create_version_manager",
    "merge_environment",
]
