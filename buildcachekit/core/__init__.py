"""
Core functionality for BuildCacheKit.

This package contains the foundational modules that other components depend on.
"""

from .directory import (
    DEFAULT_CACHE_SUBDIR,
    DEFAULT_TOOL,
    DirectoryError,
    get_cache_root,
    get_lock_path,
    validate_tool_name,
    verify_directory_writable,
)

from .exceptions import (
    BuildCacheKitError,
    KeyDecodeError,
    InvalidKeyError,
    IndexRecordError,
    NoOutputIDError,
    EntryNotFoundError,
    BuildPlanError,
    CacheTransferError,
    LockTimeoutError,
)

from .filesystem import (
    FilesystemError,
    atomic_write,
    copy_file,
    ensure_directory,
    file_size,
    format_size,
)

from .locking import destination_lock

__all__ = [
    "DEFAULT_CACHE_SUBDIR",
    "DEFAULT_TOOL",
    "DirectoryError",
    "get_cache_root",
    "get_lock_path",
    "validate_tool_name",
    "verify_directory_writable",
    "BuildCacheKitError",
    "KeyDecodeError",
    "InvalidKeyError",
    "IndexRecordError",
    "NoOutputIDError",
    "EntryNotFoundError",
    "BuildPlanError",
    "CacheTransferError",
    "LockTimeoutError",
    "FilesystemError",
    "atomic_write",
    "copy_file",
    "ensure_directory",
    "file_size",
    "format_size",
    "destination_lock",
]
