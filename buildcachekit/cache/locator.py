"""
Locating cache files under a cache root.

Two lookups are supported:
- exact: the full key is known, so the file name is computed directly
- prefix: only a leading part of the key is known, so the key's shard
  directory is listed and scanned for a matching name

Shard listings are sorted before scanning. If several files share a
prefix the lexicographically first one wins and a warning names the rest;
with full-length hash prefixes this does not happen in practice.
"""

import logging
import os
from pathlib import Path, PurePosixPath
from typing import List, Optional, Union

from buildcachekit.cache.keys import HASH_SIZE, VALID_SUFFIXES, file_name, prefix_name
from buildcachekit.core.exceptions import EntryNotFoundError

logger = logging.getLogger(__name__)


def locate_by_exact_key(
    cache_root: Union[str, Path], key: bytes, suffix: str
) -> PurePosixPath:
    """
    Return the relative path of a key's file if it exists.

    Args:
        cache_root: Cache root directory
        key: Full-length cache key
        suffix: ``a`` or ``d``

    Raises:
        EntryNotFoundError: If the file does not exist
    """
    relative = file_name(key, suffix)
    if not (Path(cache_root) / relative).is_file():
        raise EntryNotFoundError(str(relative), cache_root)
    return relative


def _list_shard(shard_dir: Path) -> List[str]:
    try:
        return sorted(os.listdir(shard_dir))
    except (FileNotFoundError, NotADirectoryError):
        return []


def locate_by_prefix(
    cache_root: Union[str, Path], prefix: bytes, suffix: Optional[str] = None
) -> PurePosixPath:
    """
    Return the relative path of the first file whose name starts with a prefix.

    Args:
        cache_root: Cache root directory
        prefix: Leading bytes of a cache key (at least one)
        suffix: If given, only names ending in ``-<suffix>`` match

    Raises:
        EntryNotFoundError: If no file matches, or the shard does not exist
        OSError: If the shard directory exists but cannot be listed
    """
    if suffix is not None and suffix not in VALID_SUFFIXES:
        raise ValueError(f"Invalid cache file suffix: {suffix!r}")

    shard, hex_prefix = prefix_name(prefix)
    names = _list_shard(Path(cache_root) / shard)

    matches = [
        name
        for name in names
        if name.startswith(hex_prefix)
        and (suffix is None or name.endswith(f"-{suffix}"))
    ]
    if not matches:
        raise EntryNotFoundError(f"{shard}/{hex_prefix}*", cache_root)

    if len(matches) > 1:
        logger.warning(
            f"{len(matches)} cache files share prefix {hex_prefix}, "
            f"using {matches[0]} (also matched: {', '.join(matches[1:])})"
        )

    return PurePosixPath(shard, matches[0])


class CacheEntryLocator:
    """
    Finds cache files under a single cache root.

    Example:
        >>> locator = CacheEntryLocator(Path('/home/user/.cache/go-build'))
        >>> locator.locate_by_exact_key(action_id, "a")
        PurePosixPath('3f/3f9c...-a')
    """

    def __init__(self, cache_root: Union[str, Path]):
        self.cache_root = Path(cache_root)

    def locate_by_exact_key(self, key: bytes, suffix: str) -> PurePosixPath:
        """See :func:`locate_by_exact_key`."""
        return locate_by_exact_key(self.cache_root, key, suffix)

    def locate_by_prefix(
        self, prefix: bytes, suffix: Optional[str] = None
    ) -> PurePosixPath:
        """See :func:`locate_by_prefix`."""
        return locate_by_prefix(self.cache_root, prefix, suffix)

    def locate(self, key: bytes, suffix: str) -> PurePosixPath:
        """Use an exact lookup for full-length keys and a prefix scan otherwise."""
        if len(key) == HASH_SIZE:
            return self.locate_by_exact_key(key, suffix)
        return self.locate_by_prefix(key, suffix)

    def path(self, relative: PurePosixPath) -> Path:
        """Absolute path of a cache-relative file name."""
        return self.cache_root / relative
