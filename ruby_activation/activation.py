"""Activation script protocol.

The probe script is evaluated by the Ruby interpreter being activated. It
prints a single JSON object describing the environment to stderr, wrapped
between two copies of ``ACTIVATION_SEPARATOR``. Shell start-up banners and
version manager warnings can surround the payload on either stream; only
the text between the separators is parsed.
"""

import json
import logging
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ruby_activation.const import ACTIVATION_SEPARATOR
from ruby_activation.exceptions import ActivationScriptError

ACTIVATION_SCRIPT = "".join(
    [
        f'STDERR.print("{ACTIVATION_SEPARATOR}" + ',
        "{ env: ENV.to_h, yjit: !!defined?(RubyVM::YJIT), version: RUBY_VERSION, gemPath: Gem.path }.to_json + ",
        f'"{ACTIVATION_SEPARATOR}")',
    ]
)

ACTIVATION_PATTERN = re.compile(f"{re.escape(ACTIVATION_SEPARATOR)}(.*){re.escape(ACTIVATION_SEPARATOR)}")


def build_activation_command(ruby: str) -> str:
    """Get the command line that runs the probe script with the given Ruby invocation.

    ``-W0`` silences interpreter warnings and ``-rjson`` loads the JSON library
    the script needs for ``to_json``.
    """
    return f"{ruby} -W0 -rjson -e '{ACTIVATION_SCRIPT}'"


def encode_activation_payload(payload: dict[str, Any]) -> str:
    """Serialize a payload the way the probe script prints it."""
    return f"{ACTIVATION_SEPARATOR}{json.dumps(payload)}{ACTIVATION_SEPARATOR}"


def extract_activation_payload(output: str) -> str:
    """Get the text between the two activation separators.

    Raises:
        ActivationScriptError: If the output has no separator-delimited payload.

    """
    match = ACTIVATION_PATTERN.search(output)
    if match is None:
        raise ActivationScriptError(output)
    return match.group(1)


def parse_activation_payload(payload: str, logger: logging.Logger | None = None) -> dict[str, Any]:
    """Parse the JSON payload, logging the raw text when it is invalid.

    Raises:
        json.JSONDecodeError: If the payload is not valid JSON.

    """
    try:
        return json.loads(payload)  # type: ignore[no-any-return]
    except json.JSONDecodeError:
        (logger or logging.getLogger(__name__)).error(f"Tried parsing invalid JSON environment: {payload}")
        raise


class ActivationPayload(BaseModel):
    """The JSON object printed by the probe script."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    env: dict[str, str]
    yjit: bool
    version: str
    gem_path: list[str] = Field(alias="gemPath")


def load_activation_payload(output: str, logger: logging.Logger | None = None) -> ActivationPayload:
    """Extract, parse and validate the probe payload from the interpreter's stderr.

    Raises:
        ActivationScriptError: If there is no payload, or it lacks one of the four keys.
        json.JSONDecodeError: If the payload is not valid JSON.

    """
    parsed = parse_activation_payload(extract_activation_payload(output), logger)
    try:
        return ActivationPayload.model_validate(parsed)
    except ValidationError as e:
        (logger or logging.getLogger(__name__)).error(f"Activation payload is missing expected fields: {e}")
        raise ActivationScriptError(output) from e
