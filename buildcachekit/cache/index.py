"""
Action (index) record parsing.

An action record is a single line of text written by the build tool when it
stores a result:

    v1 <action id hex> <output id hex> <size> <timestamp>

Only the version tag and the two hex fields are required here; size and
timestamp are read when present and otherwise ignored.
"""

import io
from dataclasses import dataclass
from typing import BinaryIO, Optional, Union

from buildcachekit.cache.keys import HASH_SIZE, ActionID, OutputID
from buildcachekit.core.exceptions import KeyDecodeError, NoOutputIDError

INDEX_VERSION = "v1"

# Records are tiny; never read more than this from a single file.
MAX_RECORD_SIZE = 4096

IndexSource = Union[bytes, bytearray, str, BinaryIO]


@dataclass(frozen=True)
class IndexRecord:
    """Decoded action record."""

    action_id: ActionID
    output_id: OutputID
    size: Optional[int] = None
    timestamp: Optional[int] = None


def _read_source(source: IndexSource) -> bytes:
    if isinstance(source, str):
        return source.encode("utf-8")
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)

    # The parser owns positioning; callers may have written or read already.
    source.seek(0, io.SEEK_SET)
    return source.read(MAX_RECORD_SIZE)


def _parse_hex_field(value: str, name: str, key_type):
    if len(value) != HASH_SIZE * 2:
        raise NoOutputIDError(
            f"{name} has {len(value)} hex digits, expected {HASH_SIZE * 2}"
        )
    try:
        return key_type.from_hex(value)
    except KeyDecodeError as e:
        raise NoOutputIDError(f"{name} is not valid hex: {value!r}") from e


def _parse_optional_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def read_index_record(source: IndexSource) -> IndexRecord:
    """
    Parse a complete action record.

    Args:
        source: Record content, or a binary file positioned anywhere

    Returns:
        The decoded record

    Raises:
        NoOutputIDError: If the version tag is wrong or the hex fields are
            missing or malformed
        OSError: If reading a file object fails
    """
    data = _read_source(source)
    try:
        text = data.decode("ascii")
    except UnicodeDecodeError as e:
        raise NoOutputIDError("record is not ASCII text") from e

    lines = text.splitlines()
    fields = lines[0].split() if lines else []

    if not fields or fields[0] != INDEX_VERSION:
        found = fields[0] if fields else "nothing"
        raise NoOutputIDError(f"expected version {INDEX_VERSION}, found {found!r}")
    if len(fields) < 3:
        raise NoOutputIDError(f"expected 2 hex fields, found {len(fields) - 1}")

    action_id = _parse_hex_field(fields[1], "action ID", ActionID)
    output_id = _parse_hex_field(fields[2], "output ID", OutputID)

    size = _parse_optional_int(fields[3] if len(fields) > 3 else None)
    timestamp = _parse_optional_int(fields[4] if len(fields) > 4 else None)

    return IndexRecord(action_id, output_id, size, timestamp)


def parse_index_record(source: IndexSource) -> OutputID:
    """
    Return the output ID an action record points to.

    Raises:
        NoOutputIDError: If the record does not yield an output ID
        OSError: If reading a file object fails
    """
    return read_index_record(source).output_id


def format_index_record(
    action_id: bytes, output_id: bytes, size: int = 0, timestamp: int = 0
) -> str:
    """Format an action record the way the build tool writes it."""
    action_id = ActionID(action_id)
    output_id = OutputID(output_id)
    return (
        f"{INDEX_VERSION} {action_id.hex()} {output_id.hex()} "
        f"{size:20d} {timestamp:20d}\n"
    )
