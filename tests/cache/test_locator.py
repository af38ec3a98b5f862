"""
Unit tests for locating cache files.
"""

import logging
import os

import pytest

from buildcachekit.cache.keys import file_name
from buildcachekit.cache.locator import (
    CacheEntryLocator,
    locate_by_exact_key,
    locate_by_prefix,
)
from buildcachekit.core.exceptions import EntryNotFoundError
from tests.fixtures.caches import key_of


class TestLocateByExactKey:
    """Test lookups with a full key."""

    def test_found(self, source_cache):
        source_cache.add_entry(key_of(0x01), key_of(0x02), b"data")

        relative = locate_by_exact_key(source_cache.root, key_of(0x01), "a")

        assert relative == file_name(key_of(0x01), "a")

    def test_output_blob(self, source_cache):
        source_cache.add_entry(key_of(0x01), key_of(0x02), b"data")

        relative = locate_by_exact_key(source_cache.root, key_of(0x02), "d")

        assert (source_cache.root / relative).read_bytes() == b"data"

    def test_missing_file(self, source_cache):
        with pytest.raises(EntryNotFoundError) as exc_info:
            locate_by_exact_key(source_cache.root, key_of(0x01), "a")
        assert exc_info.value.searched == str(file_name(key_of(0x01), "a"))

    def test_wrong_suffix_not_found(self, source_cache):
        source_cache.add_output(key_of(0x03), b"blob")
        with pytest.raises(EntryNotFoundError):
            locate_by_exact_key(source_cache.root, key_of(0x03), "a")

    def test_directory_is_not_a_match(self, source_cache):
        (source_cache.root / file_name(key_of(0x04), "a")).mkdir(parents=True)
        with pytest.raises(EntryNotFoundError):
            locate_by_exact_key(source_cache.root, key_of(0x04), "a")


class TestLocateByPrefix:
    """Test lookups with only a key prefix."""

    def test_found_by_short_prefix(self, source_cache):
        key = bytes.fromhex("abcd") + os.urandom(30)
        source_cache.add_action(key, key_of(0x02))

        relative = locate_by_prefix(source_cache.root, b"\xab\xcd")

        assert relative == file_name(key, "a")

    def test_missing_shard(self, source_cache):
        with pytest.raises(EntryNotFoundError) as exc_info:
            locate_by_prefix(source_cache.root, b"\xee\x01")
        assert "ee/ee01" in exc_info.value.searched

    def test_no_match_in_shard(self, source_cache):
        source_cache.add_action(bytes.fromhex("ab00") + bytes(30), key_of(0x02))
        with pytest.raises(EntryNotFoundError):
            locate_by_prefix(source_cache.root, b"\xab\xcd")

    def test_suffix_filter(self, source_cache):
        key = bytes.fromhex("ab") + os.urandom(31)
        source_cache.add_output(key, b"blob")
        source_cache.add_action(key, key_of(0x02))

        assert locate_by_prefix(source_cache.root, key[:4], "a") == file_name(key, "a")
        assert locate_by_prefix(source_cache.root, key[:4], "d") == file_name(key, "d")

    def test_tie_break_is_lexicographic(self, source_cache, caplog):
        first = bytes.fromhex("ab01") + bytes(30)
        second = bytes.fromhex("ab01") + b"\xff" * 30
        source_cache.add_action(second, key_of(0x02))
        source_cache.add_action(first, key_of(0x02))

        with caplog.at_level(logging.WARNING, logger="buildcachekit.cache.locator"):
            relative = locate_by_prefix(source_cache.root, b"\xab\x01", "a")

        assert relative == file_name(first, "a")
        assert "2 cache files share prefix ab01" in caplog.text

    def test_invalid_suffix(self, source_cache):
        with pytest.raises(ValueError):
            locate_by_prefix(source_cache.root, b"\xab", "x")

    def test_unreadable_shard_propagates(self, source_cache, monkeypatch):
        source_cache.add_action(key_of(0xAB), key_of(0x02))

        def deny(path):
            raise PermissionError(13, "Permission denied", str(path))

        monkeypatch.setattr("buildcachekit.cache.locator.os.listdir", deny)
        with pytest.raises(PermissionError):
            locate_by_prefix(source_cache.root, b"\xab")


class TestCacheEntryLocator:
    """Test the locator bound to a cache root."""

    def test_locate_uses_exact_lookup_for_full_keys(self, source_cache):
        source_cache.add_entry(key_of(0x05), key_of(0x06), b"x")
        locator = CacheEntryLocator(source_cache.root)

        assert locator.locate(key_of(0x05), "a") == file_name(key_of(0x05), "a")

    def test_locate_scans_for_prefixes(self, source_cache):
        source_cache.add_entry(key_of(0x05), key_of(0x06), b"x")
        locator = CacheEntryLocator(source_cache.root)

        assert locator.locate(b"\x05\x05", "a") == file_name(key_of(0x05), "a")

    def test_path(self, source_cache):
        locator = CacheEntryLocator(source_cache.root)
        relative = file_name(key_of(0x05), "d")
        assert locator.path(relative) == source_cache.root / "05" / relative.name

    def test_lookups_do_not_modify_cache(self, source_cache):
        source_cache.add_entry(key_of(0x05), key_of(0x06), b"x")
        before = sorted(p for p in source_cache.root.rglob("*"))
        locator = CacheEntryLocator(source_cache.root)

        locator.locate_by_exact_key(key_of(0x05), "a")
        locator.locate_by_prefix(b"\x06", "d")
        with pytest.raises(EntryNotFoundError):
            locator.locate_by_prefix(b"\x07")

        assert sorted(p for p in source_cache.root.rglob("*")) == before
