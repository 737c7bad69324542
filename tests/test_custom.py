"""Tests for the 'custom' version manager."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from ruby_activation.activation import ACTIVATION_SCRIPT
from ruby_activation.core.config import ActivationConfig
from ruby_activation.exceptions import MissingConfigurationError
from ruby_activation.version_managers.custom import CustomVersionManager


def custom_config(command: str | None) -> ActivationConfig:
    """Build a configuration selecting the custom version manager."""
    return ActivationConfig.from_settings({"versionManager.identifier": "custom", "customRubyCommand": command})


class TestCustomActivate:
    """Test activation through a user-defined snippet."""

    @pytest.mark.asyncio
    async def test_activate(self, tmp_path: Path, stub_runner: MagicMock) -> None:
        """Test the snippet runs before the probe and the environment is merged."""
        manager = CustomVersionManager(
            tmp_path,
            custom_config("source ~/.rubyenv && rubyenv use 3.0"),
            runner=stub_runner,
            ambient_env={"ANY": "false", "HOME": "/home/me"},
        )

        result = await manager.activate()

        stub_runner.run.assert_awaited_once_with(
            f"source ~/.rubyenv && rubyenv use 3.0 && ruby -W0 -rjson -e '{ACTIVATION_SCRIPT}'"
        )
        assert result.env == {"ANY": "true", "HOME": "/home/me"}
        assert result.version == "3.0.0"

    @pytest.mark.asyncio
    async def test_run_activated_script(self, tmp_path: Path, stub_runner: MagicMock) -> None:
        """Test arbitrary commands run after the snippet."""
        manager = CustomVersionManager(tmp_path, custom_config("eval \"$(frum init)\""), runner=stub_runner)

        await manager.run_activated_script("gem list")

        stub_runner.run.assert_awaited_once_with('eval "$(frum init)" && gem list')

    @pytest.mark.asyncio
    @pytest.mark.parametrize("command", [None, "", "  "])
    async def test_missing_snippet(self, tmp_path: Path, stub_runner: MagicMock, command: str | None) -> None:
        """Test a missing snippet raises before running anything."""
        manager = CustomVersionManager(tmp_path, custom_config(command), runner=stub_runner, ambient_env={})

        with pytest.raises(MissingConfigurationError, match="customRubyCommand"):
            await manager.activate()

        stub_runner.run.assert_not_called()
