"""
Shared utilities for CLI commands.

Provides common functionality used across multiple CLI commands to
eliminate duplication and ensure consistent behavior.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from buildcachekit.cache.transfer import TransferOptions
from buildcachekit.config.parser import BuildCacheKitConfig, load_config

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Management
# ============================================================================


def load_cli_config(args) -> BuildCacheKitConfig:
    """
    Load the configuration file named by --config, or ./bckit.yaml if present.

    Args:
        args: Parsed arguments with an optional config field

    Returns:
        Configuration (defaults if no file is found)
    """
    return load_config(getattr(args, "config", None))


def _pick(cli_value, config_value):
    return config_value if cli_value is None else cli_value


def build_transfer_options(args, config: BuildCacheKitConfig) -> TransferOptions:
    """
    Merge command-line flags over configuration file values.

    Args:
        args: Parsed 'copy' arguments
        config: Loaded configuration

    Returns:
        Options for a migration run
    """
    options = TransferOptions(
        from_base_dir=Path(args.from_dir),
        to_base_dir=Path(args.to_dir),
        action_graph=Path(_pick(args.actiongraph, config.action_graph)),
        tool=_pick(args.tool, config.tool),
        cache_subdir=_pick(args.cache_subdir, config.cache_subdir),
        need_build_only=args.need_build_only,
        dry_run=args.dry_run,
        lock_timeout=_pick(args.lock_timeout, config.lock_timeout),
        json_report=args.json_report,
    )
    logger.debug(f"Transfer options: {options}")
    return options


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def format_success_message(
    title: str,
    details: Dict[str, Any],
    width: int = 70,
) -> str:
    """
    Format a standardized success message.

    Args:
        title: Success message title
        details: Key-value pairs to display
        width: Width of message box

    Returns:
        Formatted message string
    """
    lines = []
    lines.append("=" * width)
    lines.append(title)
    lines.append("=" * width)

    for key, value in details.items():
        lines.append(f"{key}: {value}")

    lines.append("")
    return "\n".join(lines)


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)
