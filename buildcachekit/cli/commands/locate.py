"""
Locate command implementation.

Finds the cache file for a base64 cache key or key prefix.
"""

import logging

from buildcachekit.cache.keys import decode_key_prefix
from buildcachekit.cache.locator import CacheEntryLocator
from buildcachekit.cli.utils import print_error
from buildcachekit.core.exceptions import EntryNotFoundError, KeyDecodeError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the locate command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if found, 1 otherwise)
    """
    try:
        key = decode_key_prefix(args.key)
    except KeyDecodeError as e:
        print_error("Invalid cache key", str(e))
        return 1

    locator = CacheEntryLocator(args.cache_dir)
    try:
        relative = locator.locate(key, args.suffix)
    except EntryNotFoundError as e:
        print_error("Not found", str(e))
        return 1

    print(relative)
    return 0
