"""Gateway configuration loading.

Configuration lives in a YAML file whose top-level keys are the fields
of GatewayConfig. The file may also nest them under an ``opwire`` key.

Example file:

    vendor: Acme
    supported_get_operations:
      - "get.*"
      - "find.*"
    supported_delete_operations:
      - "delete.*"
    dispatch:
      date_formats: ["%d/%m/%Y", "%Y%m%d"]
      log_parameters: false

Example:
    >>> from opwire.config import load_gateway_config
    >>> config = load_gateway_config("config/opwire.yaml")
    >>> config.vendor
    'Acme'
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .exceptions import ConfigurationError
from .logging import log_debug
from .types import GatewayConfig

CONFIG_PATH_ENV = "OPWIRE_CONFIG_PATH"
CONFIG_ROOT_KEY = "opwire"


def load_gateway_config(path: str | Path | None = None) -> GatewayConfig:
    """Load gateway configuration from YAML.

    Args:
        path: Path to the YAML file. Falls back to ``OPWIRE_CONFIG_PATH``;
            with neither set, returns the defaults.

    Returns:
        The validated configuration.

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid.
    """
    if path is None:
        env_path = os.environ.get(CONFIG_PATH_ENV)
        if not env_path:
            log_debug("No gateway config path, using defaults")
            return GatewayConfig()
        path = env_path

    config_path = Path(path)
    try:
        with config_path.open() as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to read gateway config {config_path}: {e}") from e

    log_debug(f"Loaded gateway config from {config_path}")
    return parse_gateway_config(data, source=str(config_path))


def parse_gateway_config(data: Any, *, source: str = "<data>") -> GatewayConfig:
    """Validate already-parsed configuration data.

    Args:
        data: Mapping from YAML (None means empty).
        source: Where the data came from, for error messages.

    Returns:
        The validated configuration.

    Raises:
        ConfigurationError: If the data is not a valid configuration.
    """
    if data is None:
        return GatewayConfig()
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Gateway config {source} must be a mapping, got {type(data).__name__}"
        )

    if CONFIG_ROOT_KEY in data:
        data = data[CONFIG_ROOT_KEY] or {}

    try:
        return GatewayConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid gateway config {source}: {e}") from e


__all__ = ["CONFIG_PATH_ENV", "load_gateway_config", "parse_gateway_config"]
