"""Constants used throughout the Ruby activation package.

This module defines the string enumeration for version manager identifiers
and the fixed strings shared between the activation probe and its parser,
as well as the default compose invocation.
"""

from enum import Enum
from typing import Any


class StrEnum(str, Enum):
    """A string enumeration that combines str and Enum functionality.

    Members are strings and can be compared directly to string values.
    """

    def __new__(cls, value: str) -> "StrEnum":
        """Create a new StrEnum member."""
        if not isinstance(value, str):
            msg = f"StrEnum values must be strings, got {type(value).__name__}"
            raise TypeError(msg)

        obj = str.__new__(cls, value)
        obj._value_ = value
        return obj

    def __str__(self) -> str:
        """Return the string value."""
        return str(self.value)

    def __repr__(self) -> str:
        """Return a detailed representation."""
        return f"<{self.__class__.__name__}.{self.name}: '{self.value}'>"

    @classmethod
    def _missing_(cls, value: Any) -> "StrEnum":
        """Handle missing values during lookup."""
        # Settings written by hand are often capitalized ("Compose")
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member

        msg = f"{value!r} is not a valid {cls.__name__}"
        raise ValueError(msg)


class VersionManagerIdentifier(StrEnum):
    r"""Enumeration of the supported ways to reach a Ruby interpreter.

    Each value selects one version manager variant for a workspace session.
    """

    NONE = "none"
    COMPOSE = "compose"
    CUSTOM = "custom"


ACTIVATION_SEPARATOR = "RUBY_LSP_ACTIVATION_SEPARATOR"

DEFAULT_RUBY_EXECUTABLE = "ruby"

DEFAULT_COMPOSE_COMMAND = "docker --log-level=error compose --progress=quiet"
COMPOSE_RUN_FLAGS = "run --rm -i --no-deps"
COMPOSE_CONFIG_FLAGS = "config --format=json"

VERSION_MANAGERS_DOCS_URL = "https://shopify.github.io/ruby-lsp/version-managers.html"
