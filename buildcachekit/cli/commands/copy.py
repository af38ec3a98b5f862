"""
Copy command implementation.

Copies the build cache entries listed in a build plan from one cache root
to another.
"""

import logging

from buildcachekit.cache.transfer import EntryOutcome, migrate
from buildcachekit.cli.utils import (
    build_transfer_options,
    format_success_message,
    load_cli_config,
    print_error,
)
from buildcachekit.config.parser import ConfigError
from buildcachekit.core.directory import DirectoryError
from buildcachekit.core.exceptions import BuildPlanError, CacheTransferError
from buildcachekit.core.filesystem import format_size

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the copy command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    logger.debug(f"Arguments: {args}")

    # 1. Load configuration and merge flags
    try:
        config = load_cli_config(args)
        options = build_transfer_options(args, config)
        source_root = options.source_root
        destination_root = options.destination_root
    except (ConfigError, DirectoryError) as e:
        logger.error(f"Failed to load configuration: {e}")
        print_error("Failed to load configuration", str(e))
        return 1

    logger.debug(f"Source cache: {source_root}")
    logger.debug(f"Destination cache: {destination_root}")

    # 2. Migrate
    try:
        report = migrate(options)
    except BuildPlanError as e:
        print_error("Failed to load build plan", str(e))
        return 1
    except CacheTransferError as e:
        print_error("Cache copy aborted", str(e))
        if e.report is not None:
            print(e.report.summary())
        return 1

    # 3. Summary
    title = "Dry run complete" if options.dry_run else "Build cache copied"
    print(
        format_success_message(
            title,
            {
                "From": source_root,
                "To": destination_root,
                "Entries": report.entries_processed,
                "Copied": report.count(EntryOutcome.COPIED),
                "Skipped": len(report.skipped),
                "Files": report.stats.files_copied,
                "Size": format_size(report.stats.bytes_copied),
            },
        )
    )
    return 0
