"""
File system utilities for BuildCacheKit.

This module provides the small set of file operations the cache transfer
needs:
- Streaming file copy that reports the number of bytes written
- Idempotent directory creation
- Atomic writes for reports and other small outputs

Copies only ever add files to the destination tree; nothing here deletes
or renames cache entries.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Union

from buildcachekit.core.exceptions import BuildCacheKitError

logger = logging.getLogger(__name__)

# Chunk size used when streaming cache files.
COPY_BUFFER_SIZE = 1024 * 1024


# ============================================================================
# Error Handling
# ============================================================================


class FilesystemError(BuildCacheKitError):
    """Base exception for filesystem operations."""

    pass


# ============================================================================
# Directory Operations
# ============================================================================


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists (idempotent).

    Args:
        path: Directory path

    Returns:
        Path object

    Raises:
        FilesystemError: If the path exists and is not a directory
        OSError: If the directory cannot be created

    Example:
        >>> ensure_directory('/tmp/dest/.cache/go-build')
        PosixPath('/tmp/dest/.cache/go-build')
    """
    path = Path(path)
    if path.exists() and not path.is_dir():
        raise FilesystemError(f"Path exists and is not a directory: {path}")
    path.mkdir(parents=True, exist_ok=True)
    return path


# ============================================================================
# File Copy
# ============================================================================


def copy_file(source: Union[str, Path], destination: Union[str, Path]) -> int:
    """
    Copy a single file, creating the destination's parent directories.

    The source is opened before anything is created on the destination side,
    so a missing source leaves the destination tree untouched.

    Args:
        source: File to copy
        destination: Target file path (overwritten if it exists)

    Returns:
        Number of bytes written

    Raises:
        OSError: If the source cannot be read or the destination written
        shutil.SameFileError: If source and destination are the same file

    Example:
        >>> copy_file('/src/ab/abcd...-a', '/dst/ab/abcd...-a')
        178
    """
    source = Path(source)
    destination = Path(destination)

    with open(source, "rb") as src:
        if destination.exists() and os.path.samefile(source, destination):
            raise shutil.SameFileError(
                f"{source} and {destination} are the same file"
            )
        destination.parent.mkdir(parents=True, exist_ok=True)
        with open(destination, "wb") as dest:
            shutil.copyfileobj(src, dest, COPY_BUFFER_SIZE)
            size = dest.tell()

    logger.debug(f"Copied {size} bytes from {source} to {destination}")
    return size


def file_size(path: Union[str, Path]) -> int:
    """Return the size of a file in bytes."""
    return Path(path).stat().st_size


def format_size(size: int) -> str:
    """
    Format a byte count for display.

    Example:
        >>> format_size(1536)
        '1.5 KiB'
    """
    if size < 1024:
        return f"{size} B"
    value = float(size)
    for unit in ("KiB", "MiB", "GiB", "TiB"):
        value /= 1024
        if value < 1024 or unit == "TiB":
            break
    return f"{value:.1f} {unit}"


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    This ensures the file is never in a partially-written state.
    If the write fails, the original file (if any) remains unchanged.

    Args:
        file_path: Path to write to
        content: Content to write (string or bytes)
        encoding: Text encoding (used only for string content)

    Example:
        >>> atomic_write('report.json', '{"files_copied": 2}')
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Create temp file in same directory (ensures same filesystem)
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        # Atomic rename (replaces destination if it exists)
        temp_path.replace(file_path)

    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


__all__ = [
    "COPY_BUFFER_SIZE",
    "FilesystemError",
    "ensure_directory",
    "copy_file",
    "file_size",
    "format_size",
    "atomic_write",
]
