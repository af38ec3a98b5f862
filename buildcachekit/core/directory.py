"""
Cache directory layout for BuildCacheKit.

This module resolves where a build tool keeps its local compilation cache
under a base directory, and checks that a destination can be written to.

Directory Structure:
    <base>/.cache/<tool>-build/
        - 00/ ... ff/              : Shards named by the first key byte
          - <64 hex>-a             : Action (index) records
          - <64 hex>-d             : Output data blobs
    <base>/.cache/<tool>-build.lock : Lock held while a migration writes
"""

import re
from pathlib import Path, PurePath
from typing import Optional, Union

from buildcachekit.core.exceptions import BuildCacheKitError

DEFAULT_TOOL = "go"
DEFAULT_CACHE_SUBDIR = ".cache/{tool}-build"

_TOOL_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class DirectoryError(BuildCacheKitError):
    """Base exception for directory-related errors."""

    pass


def validate_tool_name(tool: str) -> str:
    """
    Check that a tool name is usable as part of a directory name.

    Args:
        tool: Build tool name (e.g., 'go')

    Returns:
        The tool name unchanged

    Raises:
        DirectoryError: If the name is empty or contains path separators
    """
    if not isinstance(tool, str) or not _TOOL_NAME_RE.match(tool):
        raise DirectoryError(f"Invalid build tool name: {tool!r}")
    return tool


def get_cache_root(
    base_dir: Union[str, Path],
    tool: str = DEFAULT_TOOL,
    cache_subdir: Optional[str] = None,
) -> Path:
    """
    Get the build cache root under a base directory.

    Args:
        base_dir: Base directory (typically a home directory)
        tool: Build tool name, substituted for ``{tool}`` in the subdirectory
        cache_subdir: Subdirectory template (default: ``.cache/{tool}-build``)

    Returns:
        Path: The cache root path.

    Raises:
        DirectoryError: If the tool name or subdirectory is invalid.

    Example:
        >>> get_cache_root(Path('/home/user'))
        PosixPath('/home/user/.cache/go-build')
    """
    validate_tool_name(tool)
    if cache_subdir is None:
        cache_subdir = DEFAULT_CACHE_SUBDIR

    try:
        subdir = cache_subdir.format(tool=tool)
    except (KeyError, IndexError, ValueError) as e:
        raise DirectoryError(f"Invalid cache subdirectory {cache_subdir!r}: {e}")

    if not subdir or PurePath(subdir).is_absolute():
        raise DirectoryError(
            f"Cache subdirectory must be a relative path, got {subdir!r}"
        )

    return Path(base_dir) / subdir


def get_lock_path(cache_root: Union[str, Path]) -> Path:
    """
    Get the lock file path for a cache root.

    The lock lives beside the cache root, never inside it, so the build
    tool never sees it as a cache entry.

    Example:
        >>> get_lock_path(Path('/home/user/.cache/go-build'))
        PosixPath('/home/user/.cache/go-build.lock')
    """
    cache_root = Path(cache_root)
    return cache_root.with_name(cache_root.name + ".lock")


def verify_directory_writable(path: Path) -> bool:
    """
    Verify that a directory exists and is writable.

    Args:
        path: Directory path to verify.

    Returns:
        bool: True if directory exists and is writable, False otherwise.
    """
    if not path.exists():
        return False

    if not path.is_dir():
        return False

    # Try to create a temporary file to test write permissions
    try:
        test_file = path / ".write_test"
        test_file.touch()
        test_file.unlink()
        return True
    except OSError:
        return False
