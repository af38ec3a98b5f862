"""
BuildCacheKit CLI argument parser.

This module implements the command-line interface for BuildCacheKit using argparse.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("buildcachekit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """BuildCacheKit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="bckit",
            description="BuildCacheKit - Selective build cache migration",
            epilog='Use "bckit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"BuildCacheKit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./bckit.yaml)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_copy_command(subparsers)
        self._add_locate_command(subparsers)
        self._add_show_index_command(subparsers)

        return parser

    def _add_copy_command(self, subparsers):
        """Add 'copy' subcommand."""
        parser = subparsers.add_parser(
            "copy",
            help="Copy the cache entries a build needed",
            description=(
                "Copy the action records and output blobs listed in a build "
                "plan from one build cache to another"
            ),
        )
        parser.add_argument(
            "--from",
            dest="from_dir",
            required=True,
            type=Path,
            metavar="DIR",
            help="Copy files from the cache directory under this base directory",
        )
        parser.add_argument(
            "--to",
            dest="to_dir",
            required=True,
            type=Path,
            metavar="DIR",
            help="Copy files to the cache directory under this base directory",
        )
        parser.add_argument(
            "--actiongraph",
            type=Path,
            metavar="FILE",
            help="Build plan JSON listing the needed actions "
            "(default: actiongraph.json)",
        )
        parser.add_argument(
            "--tool",
            metavar="NAME",
            help="Build tool whose cache is copied (default: go)",
        )
        parser.add_argument(
            "--cache-subdir",
            metavar="PATH",
            help="Cache directory relative to the base directories "
            "(default: .cache/{tool}-build)",
        )
        parser.add_argument(
            "--need-build-only",
            action="store_true",
            help="Only copy entries for packages that needed building",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be copied without copying",
        )
        parser.add_argument(
            "--lock-timeout",
            type=float,
            metavar="SECONDS",
            help="Wait this long for the destination cache lock (default: 30)",
        )
        parser.add_argument(
            "--json-report",
            type=Path,
            metavar="FILE",
            help="Write a JSON report of the run to FILE",
        )

    def _add_locate_command(self, subparsers):
        """Add 'locate' subcommand."""
        parser = subparsers.add_parser(
            "locate",
            help="Find the cache file for a key",
            description="Decode a base64 cache key or key prefix and find its file",
        )
        parser.add_argument("key", help="Base64 cache key or key prefix")
        parser.add_argument(
            "--cache-dir",
            required=True,
            type=Path,
            metavar="DIR",
            help="Cache root to search",
        )
        parser.add_argument(
            "--suffix",
            choices=["a", "d"],
            default="a",
            help="File kind: a (action record) or d (output blob) [default: a]",
        )

    def _add_show_index_command(self, subparsers):
        """Add 'show-index' subcommand."""
        parser = subparsers.add_parser(
            "show-index",
            help="Decode an action record",
            description="Print the fields of an action (index) record file",
        )
        parser.add_argument("file", type=Path, help="Action record file")

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        # Configure logging
        self._configure_logging(parsed_args)

        # Check if command specified
        if not parsed_args.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        # Command module mapping
        command_map = {
            "copy": "buildcachekit.cli.commands.copy",
            "locate": "buildcachekit.cli.commands.locate",
            "show-index": "buildcachekit.cli.commands.show_index",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        import importlib

        module = importlib.import_module(module_name)

        if not hasattr(module, "run"):
            logger.error(f"Command module {module_name} has no run() function")
            return 1

        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
