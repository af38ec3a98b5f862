"""
Centralized exception hierarchy for BuildCacheKit.

This module defines the custom exceptions used across the codebase so the
transfer engine can tell "not found" from "format error" from "I/O failure"
without matching on error messages.
"""

from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class BuildCacheKitError(Exception):
    """Base exception for all BuildCacheKit errors."""

    pass


# ============================================================================
# Cache Key Exceptions
# ============================================================================


class KeyDecodeError(BuildCacheKitError, ValueError):
    """Raised when a cache key cannot be decoded from its transport encoding."""

    pass


class InvalidKeyError(KeyDecodeError):
    """Raised when a cache key does not have exactly the expected length."""

    def __init__(self, length: int, expected: int):
        self.length = length
        self.expected = expected
        super().__init__(
            f"Invalid cache key length: {length} bytes, expected {expected}"
        )


# ============================================================================
# Cache Entry Exceptions
# ============================================================================


class IndexRecordError(BuildCacheKitError):
    """Base exception for index record content problems."""

    pass


class NoOutputIDError(IndexRecordError):
    """Raised when an index record does not yield an output ID."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"no output ID: {reason}")


class EntryNotFoundError(BuildCacheKitError):
    """Raised when no cache file matches a key or key prefix."""

    def __init__(self, searched: str, cache_root=None):
        self.searched = searched
        self.cache_root = cache_root
        msg = f"No cache file matched: {searched}"
        if cache_root is not None:
            msg += f" (under {cache_root})"
        super().__init__(msg)


# ============================================================================
# Build Plan Exceptions
# ============================================================================


class BuildPlanError(BuildCacheKitError):
    """Raised when the build plan manifest cannot be read or decoded."""

    pass


# ============================================================================
# Transfer Exceptions
# ============================================================================


class CacheTransferError(BuildCacheKitError):
    """
    Raised when a migration must abort.

    Carries the report accumulated up to the failure so callers can still
    show what was copied before the abort.
    """

    def __init__(self, message: str, report: Optional[object] = None):
        self.report = report
        super().__init__(message)


class LockTimeoutError(CacheTransferError):
    """Raised when the destination cache lock cannot be acquired in time."""

    pass
