"""
Tests for CLI argument parser.
"""

from pathlib import Path

import pytest

from buildcachekit.cli.parser import CLI


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_creation(self):
        """Test CLI can be created."""
        cli = CLI()
        assert cli is not None
        assert cli.parser is not None

    def test_no_command_shows_help(self, capsys):
        """Test that running without command shows help."""
        cli = CLI()
        result = cli.run([])

        assert result == 1
        captured = capsys.readouterr()
        assert "usage:" in captured.out.lower() or "usage:" in captured.err.lower()

    def test_version_flag(self, capsys):
        """Test --version flag."""
        cli = CLI()

        with pytest.raises(SystemExit) as exc_info:
            cli.run(["--version"])

        assert exc_info.value.code == 0
        captured = capsys.readouterr()
        assert "BuildCacheKit" in captured.out

    def test_global_flags(self):
        cli = CLI()
        args = cli.parse_args(["-v", "--config", "x.yaml", "show-index", "f"])

        assert args.verbose is True
        assert args.quiet is False
        assert args.config == Path("x.yaml")


class TestCopyCommand:
    """Test copy command parsing."""

    def test_copy_defaults(self):
        cli = CLI()
        args = cli.parse_args(["copy", "--from", "/a", "--to", "/b"])

        assert args.command == "copy"
        assert args.from_dir == Path("/a")
        assert args.to_dir == Path("/b")
        assert args.actiongraph is None
        assert args.tool is None
        assert args.cache_subdir is None
        assert args.need_build_only is False
        assert args.dry_run is False
        assert args.lock_timeout is None
        assert args.json_report is None

    def test_copy_all_options(self):
        cli = CLI()
        args = cli.parse_args(
            [
                "copy",
                "--from",
                "/a",
                "--to",
                "/b",
                "--actiongraph",
                "plan.json",
                "--tool",
                "zig",
                "--cache-subdir",
                "cache/{tool}",
                "--need-build-only",
                "--dry-run",
                "--lock-timeout",
                "2.5",
                "--json-report",
                "r.json",
            ]
        )

        assert args.actiongraph == Path("plan.json")
        assert args.tool == "zig"
        assert args.cache_subdir == "cache/{tool}"
        assert args.need_build_only is True
        assert args.dry_run is True
        assert args.lock_timeout == 2.5
        assert args.json_report == Path("r.json")

    def test_copy_requires_directories(self):
        cli = CLI()
        with pytest.raises(SystemExit):
            cli.parse_args(["copy", "--from", "/a"])


class TestLocateCommand:
    """Test locate command parsing."""

    def test_locate(self):
        cli = CLI()
        args = cli.parse_args(["locate", "AAAA", "--cache-dir", "/c"])

        assert args.command == "locate"
        assert args.key == "AAAA"
        assert args.cache_dir == Path("/c")
        assert args.suffix == "a"

    def test_locate_invalid_suffix(self):
        cli = CLI()
        with pytest.raises(SystemExit):
            cli.parse_args(["locate", "AAAA", "--cache-dir", "/c", "--suffix", "x"])


class TestShowIndexCommand:
    """Test show-index command parsing."""

    def test_show_index(self):
        cli = CLI()
        args = cli.parse_args(["show-index", "00/abc-a"])

        assert args.command == "show-index"
        assert args.file == Path("00/abc-a")


class TestDispatch:
    """Test error handling around command dispatch."""

    def test_unexpected_error_returns_one(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        cli = CLI()

        # show-index on a missing file raises FileNotFoundError inside the command
        assert cli.run(["show-index", str(tmp_path / "missing")]) == 1

    def test_keyboard_interrupt(self, monkeypatch):
        cli = CLI()

        def interrupt(args):
            raise KeyboardInterrupt

        monkeypatch.setattr(cli, "_dispatch_command", interrupt)
        assert cli.run(["show-index", "f"]) == 130
