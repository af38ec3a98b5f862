"""
Unit tests for filesystem utilities.
"""

import shutil

import pytest

from buildcachekit.core.filesystem import (
    COPY_BUFFER_SIZE,
    FilesystemError,
    atomic_write,
    copy_file,
    ensure_directory,
    file_size,
    format_size,
)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def sample_file(tmp_path):
    """Create a sample file for testing."""
    file_path = tmp_path / "sample.bin"
    file_path.write_bytes(b"Hello, World!")
    return file_path


# ============================================================================
# copy_file
# ============================================================================


class TestCopyFile:
    """Test single-file copies."""

    def test_returns_bytes_written(self, sample_file, tmp_path):
        dest = tmp_path / "out" / "copy.bin"
        assert copy_file(sample_file, dest) == 13
        assert dest.read_bytes() == b"Hello, World!"

    def test_creates_parent_directories(self, sample_file, tmp_path):
        dest = tmp_path / "a" / "b" / "c" / "copy.bin"
        copy_file(sample_file, dest)
        assert dest.parent.is_dir()

    def test_large_file(self, tmp_path):
        source = tmp_path / "large.bin"
        data = bytes(range(256)) * (COPY_BUFFER_SIZE // 256 + 7)
        source.write_bytes(data)

        assert copy_file(source, tmp_path / "large-copy.bin") == len(data)
        assert (tmp_path / "large-copy.bin").read_bytes() == data

    def test_empty_file(self, tmp_path):
        source = tmp_path / "empty"
        source.write_bytes(b"")
        assert copy_file(source, tmp_path / "dest" / "empty") == 0

    def test_overwrites_existing(self, sample_file, tmp_path):
        dest = tmp_path / "copy.bin"
        dest.write_bytes(b"old content that is longer")
        copy_file(sample_file, dest)
        assert dest.read_bytes() == b"Hello, World!"

    def test_missing_source_leaves_destination_untouched(self, tmp_path):
        dest = tmp_path / "never" / "created"
        with pytest.raises(FileNotFoundError):
            copy_file(tmp_path / "missing", dest)
        assert not dest.parent.exists()

    def test_same_file_is_left_intact(self, sample_file):
        with pytest.raises(shutil.SameFileError):
            copy_file(sample_file, sample_file)
        assert sample_file.read_bytes() == b"Hello, World!"

    def test_same_file_through_symlink(self, sample_file, tmp_path):
        alias = tmp_path / "alias.bin"
        alias.symlink_to(sample_file)
        with pytest.raises(OSError):
            copy_file(sample_file, alias)
        assert sample_file.read_bytes() == b"Hello, World!"


# ============================================================================
# Directories
# ============================================================================


class TestEnsureDirectory:
    """Test idempotent directory creation."""

    def test_creates_nested(self, tmp_path):
        path = ensure_directory(tmp_path / "x" / "y")
        assert path.is_dir()

    def test_idempotent(self, tmp_path):
        ensure_directory(tmp_path / "x")
        ensure_directory(tmp_path / "x")
        assert (tmp_path / "x").is_dir()

    def test_file_in_the_way(self, sample_file):
        with pytest.raises(FilesystemError):
            ensure_directory(sample_file)


# ============================================================================
# Sizes
# ============================================================================


def test_file_size(sample_file):
    assert file_size(sample_file) == 13


@pytest.mark.parametrize(
    "size,expected",
    [
        (0, "0 B"),
        (1023, "1023 B"),
        (1024, "1.0 KiB"),
        (1536, "1.5 KiB"),
        (5 * 1024 * 1024, "5.0 MiB"),
        (3 * 1024**3, "3.0 GiB"),
        (2048 * 1024**4, "2048.0 TiB"),
    ],
)
def test_format_size(size, expected):
    assert format_size(size) == expected


# ============================================================================
# atomic_write
# ============================================================================


class TestAtomicWrite:
    """Test atomic writes."""

    def test_write_text(self, tmp_path):
        target = tmp_path / "report.json"
        atomic_write(target, '{"files": 2}')
        assert target.read_text() == '{"files": 2}'

    def test_write_bytes(self, tmp_path):
        target = tmp_path / "data.bin"
        atomic_write(target, b"\x00\x01")
        assert target.read_bytes() == b"\x00\x01"

    def test_replaces_existing(self, tmp_path):
        target = tmp_path / "report.json"
        target.write_text("old")
        atomic_write(target, "new")
        assert target.read_text() == "new"

    def test_no_temp_files_left(self, tmp_path):
        atomic_write(tmp_path / "sub" / "report.json", "x")
        assert [p.name for p in (tmp_path / "sub").iterdir()] == ["report.json"]
