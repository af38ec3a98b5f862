"""YAML configuration parser for BuildCacheKit.

This module provides parsing and validation for bckit.yaml configuration files.
Every key is optional; command-line flags override what the file sets.

Example bckit.yaml:

    version: 1
    tool: go
    cache_subdir: .cache/{tool}-build
    action_graph: actiongraph.json
    lock_timeout: 30
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from buildcachekit.core.directory import (
    DEFAULT_CACHE_SUBDIR,
    DEFAULT_TOOL,
    DirectoryError,
    get_cache_root,
    validate_tool_name,
)
from buildcachekit.core.exceptions import BuildCacheKitError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "bckit.yaml"
DEFAULT_ACTION_GRAPH = "actiongraph.json"
DEFAULT_LOCK_TIMEOUT = 30

_KNOWN_KEYS = {"version", "tool", "cache_subdir", "action_graph", "lock_timeout"}


class ConfigError(BuildCacheKitError):
    """Configuration parsing or validation error."""

    pass


@dataclass
class BuildCacheKitConfig:
    """Settings read from a configuration file."""

    version: int = 1
    tool: str = DEFAULT_TOOL
    cache_subdir: str = DEFAULT_CACHE_SUBDIR
    action_graph: str = DEFAULT_ACTION_GRAPH
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT


def parse_config(config_path: Path) -> BuildCacheKitConfig:
    """
    Parse bckit.yaml configuration file.

    Args:
        config_path: Path to bckit.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is missing or invalid
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")

    if data is None:
        return BuildCacheKitConfig()

    return _parse_and_validate(data)


def load_config(
    config_path: Optional[Path] = None, project_root: Optional[Path] = None
) -> BuildCacheKitConfig:
    """
    Load configuration, falling back to defaults when no file exists.

    An explicitly given path must exist; the default ./bckit.yaml is optional.
    """
    if config_path is not None:
        return parse_config(Path(config_path))

    default_path = (project_root or Path.cwd()) / DEFAULT_CONFIG_FILENAME
    if not default_path.exists():
        logger.debug(f"Config file not found (optional): {default_path}")
        return BuildCacheKitConfig()

    logger.debug(f"Loading configuration from {default_path}")
    return parse_config(default_path)


def _require_type(data: dict, key: str, types, type_name: str) -> Any:
    value = data[key]
    # bool is an int subclass; never accept it for numeric fields.
    if isinstance(value, bool) or not isinstance(value, types):
        raise ConfigError(f"{key} must be {type_name}, got {value!r}")
    return value


def _parse_and_validate(data: Any) -> BuildCacheKitConfig:
    """Parse and validate configuration data."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")

    config = BuildCacheKitConfig()

    if "version" in data:
        version = _require_type(data, "version", int, "an integer")
        if version != 1:
            raise ConfigError(f"Unsupported version: {version} (expected 1)")
        config.version = version

    if "tool" in data:
        config.tool = _require_type(data, "tool", str, "a string")

    if "cache_subdir" in data:
        config.cache_subdir = _require_type(data, "cache_subdir", str, "a string")

    if "action_graph" in data:
        config.action_graph = _require_type(data, "action_graph", str, "a string")

    if "lock_timeout" in data:
        timeout = _require_type(data, "lock_timeout", (int, float), "a number")
        if timeout < 0:
            raise ConfigError(f"lock_timeout must not be negative, got {timeout}")
        config.lock_timeout = timeout

    try:
        validate_tool_name(config.tool)
        get_cache_root(Path("."), config.tool, config.cache_subdir)
    except DirectoryError as e:
        raise ConfigError(str(e)) from e

    return config
