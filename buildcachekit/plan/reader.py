"""Build plan (action graph) manifest reader.

The manifest is a JSON array of objects, one per package the build needed:

    [{"ActionID": "...", "Package": "fmt", "Mode": "build", "NeedBuild": true}]

Unknown fields are ignored so manifests from newer tool versions still load.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Union

from buildcachekit.core.exceptions import BuildPlanError

logger = logging.getLogger(__name__)

_TRUE_STRINGS = {"true", "1", "yes"}
_FALSE_STRINGS = {"false", "0", "no", ""}


@dataclass(frozen=True)
class BuildPlanEntry:
    """One package the build plan needed."""

    action_id: str
    package: str
    mode: str
    need_build: bool = False


def _parse_need_build(value: Any, index: int) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise BuildPlanError(f"Entry {index}: invalid NeedBuild value {value!r}")


def _parse_string(data: dict, key: str, index: int) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise BuildPlanError(
            f"Entry {index}: {key} must be a string, got {type(value).__name__}"
        )
    return value


def _parse_entry(data: Any, index: int) -> BuildPlanEntry:
    if not isinstance(data, dict):
        raise BuildPlanError(
            f"Entry {index}: expected an object, got {type(data).__name__}"
        )
    return BuildPlanEntry(
        action_id=_parse_string(data, "ActionID", index),
        package=_parse_string(data, "Package", index),
        mode=_parse_string(data, "Mode", index),
        need_build=_parse_need_build(data.get("NeedBuild", False), index),
    )


def parse_plan(data: Any) -> List[BuildPlanEntry]:
    """
    Convert decoded manifest JSON into build plan entries.

    Raises:
        BuildPlanError: If the data is not an array of entry objects
    """
    if not isinstance(data, list):
        raise BuildPlanError(
            f"Build plan must be a JSON array, got {type(data).__name__}"
        )
    return [_parse_entry(item, index) for index, item in enumerate(data)]


def load_plan(path: Union[str, Path]) -> List[BuildPlanEntry]:
    """
    Load a build plan manifest.

    Args:
        path: Path to the JSON manifest

    Returns:
        Entries in manifest order

    Raises:
        BuildPlanError: If the file is missing, unreadable or malformed
    """
    path = Path(path)
    logger.debug(f"Loading build plan from {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise BuildPlanError(f"Build plan not found: {path}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise BuildPlanError(f"Invalid JSON in build plan {path}: {e}") from e
    except OSError as e:
        raise BuildPlanError(f"Failed to read build plan {path}: {e}") from e

    entries = parse_plan(data)
    logger.debug(f"Loaded {len(entries)} build plan entries")
    return entries


def filter_plan(
    entries: Iterable[BuildPlanEntry], need_build_only: bool = False
) -> List[BuildPlanEntry]:
    """Optionally keep only the entries whose package required building."""
    if not need_build_only:
        return list(entries)
    return [entry for entry in entries if entry.need_build]
