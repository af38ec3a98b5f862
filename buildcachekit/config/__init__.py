"""
Configuration management for BuildCacheKit.

Modules:
    parser: Parse and validate bckit.yaml
"""

from .parser import (
    BuildCacheKitConfig,
    ConfigError,
    load_config,
    parse_config,
)

__all__ = ["BuildCacheKitConfig", "ConfigError", "load_config", "parse_config"]
