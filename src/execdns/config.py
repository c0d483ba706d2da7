"""Configuration loading from environment variables."""

import os
from collections.abc import Mapping

from execdns.exceptions import ConfigurationError
from execdns.models import DEFAULT_MAX_OUTPUT_BYTES, DEFAULT_PLUGIN_DIR, ProviderConfig

PLUGIN_NAME_VAR = "EXECUTE_PLUGIN_NAME"
PLUGIN_ENV_VAR = "EXECUTE_ENV"
PLUGIN_DIR_VAR = "EXECUTE_PLUGIN_DIR"
MAX_OUTPUT_BYTES_VAR = "EXECUTE_MAX_OUTPUT_BYTES"


def split_env_list(value: str) -> list[str]:
    """Split a comma-separated KEY=VALUE list.

    Each element is stripped of surrounding whitespace; empty elements
    are dropped, so an unset or blank variable yields an empty list.

    Args:
        value: Raw variable value, e.g. "TEST=indeed, VICTORY=ahead".

    Returns:
        The list of KEY=VALUE strings in their original order.
    """
    items = (item.strip() for item in value.split(","))
    return [item for item in items if item]


def normalize_max_output(value: int | None, name: str = "max_output_bytes") -> int | None:
    """Validate a per-stream output cap.

    Args:
        value: Cap in bytes. 0 and None both mean no cap.
        name: Setting name used in the error message.

    Returns:
        The cap, or None when output is not capped.

    Raises:
        ConfigurationError: If value is negative.
    """
    if value is None:
        return None
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got: {value}")
    return value or None


def _parse_max_output(raw: str | None) -> int | None:
    if raw is None or not raw.strip():
        return DEFAULT_MAX_OUTPUT_BYTES
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(
            f"{MAX_OUTPUT_BYTES_VAR} must be an integer, got: {raw!r}"
        ) from None
    return normalize_max_output(value, MAX_OUTPUT_BYTES_VAR)


def load_config(environ: Mapping[str, str] | None = None) -> ProviderConfig:
    """Build a ProviderConfig from environment variables.

    Missing required values are not rejected here; the provider
    validates them when it is constructed.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Returns:
        The loaded configuration.

    Raises:
        ConfigurationError: If an optional setting has an invalid value.
    """
    if environ is None:
        environ = os.environ

    return ProviderConfig(
        plugin_name=environ.get(PLUGIN_NAME_VAR, ""),
        environment=tuple(split_env_list(environ.get(PLUGIN_ENV_VAR, ""))),
        plugin_dir=environ.get(PLUGIN_DIR_VAR) or DEFAULT_PLUGIN_DIR,
        max_output_bytes=_parse_max_output(environ.get(MAX_OUTPUT_BYTES_VAR)),
    )
