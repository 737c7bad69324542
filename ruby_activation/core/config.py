from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ruby_activation.const import DEFAULT_RUBY_EXECUTABLE, VersionManagerIdentifier


class VersionManagerConfig(BaseModel):
    """Settings under the ``versionManager`` namespace."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    identifier: str = Field(
        default=str(VersionManagerIdentifier.NONE),
        description="Which version manager variant activates Ruby for this workspace. "
        "Any identifier registered with VersionManagerFactory is accepted.",
    )
    compose_service: str | None = Field(
        default=None,
        alias="composeService",
        description="The compose service that runs Ruby. Required by the 'compose' version manager.",
    )
    compose_custom_command: str | None = Field(
        default=None,
        alias="composeCustomCommand",
        description="Replaces the default compose invocation (e.g. 'podman-compose'). "
        "If None, 'docker --log-level=error compose --progress=quiet' is used.",
    )

    @field_validator("identifier", mode="before")
    @classmethod
    def normalize_identifier(cls, value: Any) -> Any:
        """Accept identifiers regardless of case and surrounding whitespace."""
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("compose_service", "compose_custom_command")
    @classmethod
    def blank_as_unset(cls, value: str | None) -> str | None:
        """Treat empty or whitespace-only strings as not configured."""
        if value is not None and not value.strip():
            return None
        return value


class ActivationConfig(BaseModel):
    """Configuration for activating a Ruby environment in one workspace."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    version_manager: VersionManagerConfig = Field(
        default_factory=VersionManagerConfig,
        alias="versionManager",
        description="Version manager selection and its variant-specific settings.",
    )
    bundle_gemfile: str = Field(
        default="",
        alias="bundleGemfile",
        description="Path to a custom Gemfile. Relative paths are resolved against the workspace root. "
        "Commands run in the directory containing it.",
    )
    ruby_path: str = Field(
        default=DEFAULT_RUBY_EXECUTABLE,
        alias="rubyPath",
        description="The Ruby executable used by the 'none' version manager.",
    )
    custom_ruby_command: str | None = Field(
        default=None,
        alias="customRubyCommand",
        description="Shell snippet run before Ruby by the 'custom' version manager "
        "(e.g. 'source ~/.rubyenv && rubyenv use 3.3').",
    )
    verbose: bool = Field(default=False, description="Whether to log verbose output.")

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any] | None = None) -> "ActivationConfig":
        """Build a configuration from the editor's settings mapping.

        Accepts either nested mappings (``{"versionManager": {"composeService": ...}}``)
        or dotted keys (``{"versionManager.composeService": ...}``).
        """
        nested: dict[str, Any] = {}
        for key, value in (settings or {}).items():
            *parents, leaf = key.split(".")
            target = nested
            for parent in parents:
                target = target.setdefault(parent, {})
            if isinstance(value, Mapping) and isinstance(target.get(leaf), dict):
                target[leaf].update(value)
            else:
                target[leaf] = dict(value) if isinstance(value, Mapping) else value
        return cls.model_validate(nested)
