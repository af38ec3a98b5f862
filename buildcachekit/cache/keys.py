"""
Cache key encoding and on-disk naming.

Cache keys are 32-byte hashes. Build plans carry them base64 encoded; the
cache stores them as lowercase hex file names sharded by their first byte:

    <hh>/<64 hex digits>-<suffix>

where suffix ``a`` marks an action (index) record and ``d`` an output blob.
"""

import base64
import binascii
import re
from pathlib import PurePosixPath
from typing import Tuple, Union

from buildcachekit.core.exceptions import InvalidKeyError, KeyDecodeError

HASH_SIZE = 32

ACTION_SUFFIX = "a"
OUTPUT_SUFFIX = "d"
VALID_SUFFIXES = (ACTION_SUFFIX, OUTPUT_SUFFIX)

# Both base64 alphabets; the standard one is what JSON encoders emit for
# raw byte slices, the URL-safe one is what the build plan format names.
_BASE64_RE = re.compile(r"^[A-Za-z0-9+/_-]*={0,2}$")
_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")


class CacheKey(bytes):
    """A fixed-length cache key. Rejects any length other than HASH_SIZE."""

    def __new__(cls, value: Union[bytes, bytearray, memoryview]):
        data = bytes(value)
        if len(data) != HASH_SIZE:
            raise InvalidKeyError(len(data), HASH_SIZE)
        return super().__new__(cls, data)

    @classmethod
    def from_hex(cls, text: str) -> "CacheKey":
        """Build a key from 64 hex digits."""
        if not _HEX_RE.match(text) or len(text) % 2:
            raise KeyDecodeError(f"Invalid hex cache key: {text!r}")
        return cls(bytes.fromhex(text))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.hex()!r})"


class ActionID(CacheKey):
    """Hash of a complete description of a repeatable computation."""


class OutputID(CacheKey):
    """Hash of the output of a computation."""


def _decode_base64(encoded: str) -> bytes:
    if not isinstance(encoded, str):
        raise KeyDecodeError(
            f"Cache key must be a string, got {type(encoded).__name__}"
        )
    text = encoded.strip()
    if not _BASE64_RE.match(text):
        raise KeyDecodeError(f"Invalid base64 cache key: {encoded!r}")

    text = text.rstrip("=").replace("+", "-").replace("/", "_")
    if len(text) % 4 == 1:
        raise KeyDecodeError(f"Invalid base64 cache key length: {encoded!r}")
    text += "=" * (-len(text) % 4)

    try:
        return base64.urlsafe_b64decode(text)
    except (binascii.Error, ValueError) as e:
        raise KeyDecodeError(f"Invalid base64 cache key {encoded!r}: {e}") from e


def decode_key(encoded: str) -> ActionID:
    """
    Decode a base64 cache key.

    Args:
        encoded: Base64 text (URL-safe or standard alphabet, padding optional)

    Returns:
        The decoded key

    Raises:
        KeyDecodeError: If the text is not base64
        InvalidKeyError: If it does not decode to exactly HASH_SIZE bytes
    """
    return ActionID(_decode_base64(encoded))


def decode_key_prefix(encoded: str) -> bytes:
    """
    Decode a base64 key or key prefix of 1 to HASH_SIZE bytes.

    Raises:
        KeyDecodeError: If the text is not base64, empty, or too long
    """
    data = _decode_base64(encoded)
    if not data:
        raise KeyDecodeError(f"Empty cache key prefix: {encoded!r}")
    if len(data) > HASH_SIZE:
        raise InvalidKeyError(len(data), HASH_SIZE)
    return data


def encode_key(key: bytes) -> str:
    """Encode a key as padded URL-safe base64."""
    return base64.urlsafe_b64encode(bytes(key)).decode("ascii")


def file_name(key: bytes, suffix: str) -> PurePosixPath:
    """
    Return the cache-relative path of the file holding a key.

    Args:
        key: A HASH_SIZE byte key
        suffix: ``a`` for an action record, ``d`` for an output blob

    Example:
        >>> str(file_name(bytes(32), "a"))
        '00/0000000000000000000000000000000000000000000000000000000000000000-a'
    """
    if suffix not in VALID_SUFFIXES:
        raise ValueError(f"Invalid cache file suffix: {suffix!r}")
    key = CacheKey(key)
    return PurePosixPath(f"{key[0]:02x}", f"{key.hex()}-{suffix}")


def prefix_name(prefix: bytes) -> Tuple[str, str]:
    """Return the shard directory and hex file-name prefix for a key prefix."""
    if not prefix:
        raise ValueError("Cache key prefix must not be empty")
    return f"{prefix[0]:02x}", bytes(prefix).hex()
