"""
Build cache entry handling for BuildCacheKit.

This package resolves and copies entries of a content-addressed build cache
whose files are named by 32-byte hashes and sharded by their first byte.

Modules:
    keys: Cache key decoding and on-disk file naming
    index: Action (index) record parsing
    locator: Find cache files by exact key or key prefix
    transfer: Copy the entries a build plan needed between cache roots
"""

from .keys import (
    ACTION_SUFFIX,
    HASH_SIZE,
    OUTPUT_SUFFIX,
    ActionID,
    CacheKey,
    OutputID,
    decode_key,
    decode_key_prefix,
    encode_key,
    file_name,
)
from .index import (
    INDEX_VERSION,
    IndexRecord,
    format_index_record,
    parse_index_record,
    read_index_record,
)
from .locator import CacheEntryLocator, locate_by_exact_key, locate_by_prefix
from .transfer import (
    CacheTransferEngine,
    EntryOutcome,
    EntryResult,
    TransferOptions,
    TransferReport,
    TransferStats,
    migrate,
)

__all__ = [
    "ACTION_SUFFIX",
    "HASH_SIZE",
    "OUTPUT_SUFFIX",
    "ActionID",
    "CacheKey",
    "OutputID",
    "decode_key",
    "decode_key_prefix",
    "encode_key",
    "file_name",
    "INDEX_VERSION",
    "IndexRecord",
    "format_index_record",
    "parse_index_record",
    "read_index_record",
    "CacheEntryLocator",
    "locate_by_exact_key",
    "locate_by_prefix",
    "CacheTransferEngine",
    "EntryOutcome",
    "EntryResult",
    "TransferOptions",
    "TransferReport",
    "TransferStats",
    "migrate",
]
