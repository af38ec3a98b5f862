"""
Concurrent access control for BuildCacheKit.

Two migrations writing into the same destination cache at once would race
on the same files. This module serializes them with a file-based lock
beside the destination cache root.

Usage:
    from buildcachekit.core.locking import destination_lock

    with destination_lock(cache_root, timeout=30):
        # Safely populate the destination cache
        pass
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout

from buildcachekit.core.directory import get_lock_path
from buildcachekit.core.exceptions import CacheTransferError, LockTimeoutError

logger = logging.getLogger(__name__)


@contextmanager
def destination_lock(cache_root: Path, timeout: float = 30):
    """
    Acquire the lock guarding writes into a cache root.

    Args:
        cache_root: Destination cache root
        timeout: Maximum wait time in seconds (default: 30)

    Yields:
        Path to the lock file

    Raises:
        LockTimeoutError: If lock can't be acquired within timeout
        CacheTransferError: If the lock directory cannot be created
    """
    lock_path = get_lock_path(cache_root)
    try:
        lock_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CacheTransferError(
            f"Failed to create lock directory {lock_path.parent}: {e}"
        ) from e
    lock = FileLock(lock_path, timeout=timeout)

    try:
        with lock:
            logger.debug(f"Acquired destination lock: {lock_path}")
            yield lock_path
            logger.debug(f"Released destination lock: {lock_path}")
    except Timeout as e:
        logger.error(
            f"Could not acquire destination lock after {timeout}s. "
            "Another migration into this cache may be running."
        )
        raise LockTimeoutError(
            f"Could not acquire lock {lock_path} after {timeout}s. "
            "Another migration into this cache may be running."
        ) from e
