"""
Configuration loader with YAML file support and environment variable overrides.

Supports loading from:
1. Default values (defined in settings.py)
2. YAML configuration file
3. Environment variables (highest priority)

Environment variables use the pattern: WEB_READER__{SECTION}__{KEY}
Example: WEB_READER__WAITS__CONNECT_TIMEOUT_MS=20000
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from web_reader.config.settings import APP_HOME, Settings
from web_reader.core.exceptions import ConfigurationError


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries, with override taking precedence.

    Args:
        base: Base dictionary to merge into
        override: Dictionary with values to override

    Returns:
        Merged dictionary with override values taking precedence
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def _parse_env_value(value: str) -> Any:
    """
    Parse environment variable string into appropriate Python type.

    Args:
        value: String value from environment variable

    Returns:
        Parsed value (bool, int, float, None or string)
    """
    if value.lower() in ("true", "yes", "on"):
        return True
    if value.lower() in ("false", "no", "off"):
        return False

    if value.lower() in ("none", "null", ""):
        return None

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    return value


def _load_env_overrides(prefix: str = "WEB_READER") -> dict[str, Any]:
    """
    Load configuration overrides from environment variables.

    Environment variables should follow the pattern:
    {PREFIX}__{SECTION}__{KEY}

    For example:
    - WEB_READER__BROWSER__HEADLESS=false
    - WEB_READER__LOGGING__LEVEL=DEBUG

    Args:
        prefix: Environment variable prefix to look for

    Returns:
        Dictionary of configuration overrides
    """
    overrides: dict[str, Any] = {}
    prefix_with_sep = f"{prefix}__"

    for key, value in os.environ.items():
        if not key.startswith(prefix_with_sep):
            continue

        key_path = key[len(prefix_with_sep):].lower().split("__")

        if len(key_path) < 2:
            continue

        current = overrides
        for part in key_path[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]

        current[key_path[-1]] = _parse_env_value(value)

    return overrides


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file

    Returns:
        Dictionary of configuration values

    Raises:
        ConfigurationError: If the file is missing, unreadable or not a mapping
    """
    if not path.exists():
        raise ConfigurationError(
            "Configuration file not found", details={"path": str(path)})

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in configuration file: {e}",
            details={"path": str(path)},
        ) from e

    if content is None:
        return {}

    if not isinstance(content, dict):
        raise ConfigurationError(
            f"Configuration file must contain a mapping, got: {type(content).__name__}",
            details={"path": str(path)},
        )

    return content


def load_config(
    config_path: Path | str | None = None,
    env_prefix: str = "WEB_READER",
) -> Settings:
    """
    Load configuration from YAML file with environment variable overrides.

    Priority (highest to lowest):
    1. Environment variables
    2. YAML configuration file
    3. Default values

    Args:
        config_path: Path to YAML configuration file. If None, uses defaults only.
        env_prefix: Prefix for environment variables

    Returns:
        Validated Settings instance

    Raises:
        ConfigurationError: If the file is invalid or values fail validation
    """
    config_data: dict[str, Any] = {}

    if config_path is not None:
        yaml_config = _load_yaml_file(Path(config_path))
        config_data = _deep_merge(config_data, yaml_config)

    env_overrides = _load_env_overrides(env_prefix)
    config_data = _deep_merge(config_data, env_overrides)

    try:
        return Settings(**config_data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def get_default_config_path() -> Path | None:
    """
    Find the default configuration file path.

    Searches for a configuration file in:
    1. Current working directory (web-reader.yaml)
    2. The application home directory (~/.web-reader/config.yaml)

    Returns:
        Path to configuration file if found, None otherwise
    """
    search_paths = [
        Path.cwd() / "web-reader.yaml",
        APP_HOME / "config.yaml",
    ]

    for path in search_paths:
        if path.exists():
            return path

    return None
