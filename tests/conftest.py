"""Shared test fixtures for Ruby activation tests."""

from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from ruby_activation.activation import encode_activation_payload
from ruby_activation.data import CommandOutput
from ruby_activation.shell import ShellRunner

DEFAULT_PAYLOAD: dict[str, Any] = {
    "env": {"ANY": "true"},
    "yjit": True,
    "version": "3.0.0",
    "gemPath": ["/gems/3.0.0", "/usr/lib/ruby/gems/3.0.0"],
}


@pytest.fixture
def activation_output() -> Callable[..., CommandOutput]:
    """Build the CommandOutput a successful probe produces."""

    def _build(payload: dict[str, Any] | None = None, noise: str = "") -> CommandOutput:
        return CommandOutput(stdout=noise, stderr=f"{noise}{encode_activation_payload(payload or DEFAULT_PAYLOAD)}\n")

    return _build


@pytest.fixture
def stub_runner(activation_output: Callable[..., CommandOutput]) -> MagicMock:
    """Mock ShellRunner whose commands all print the default activation payload."""
    runner = MagicMock(spec=ShellRunner)
    runner.run = AsyncMock(return_value=activation_output())
    return runner
