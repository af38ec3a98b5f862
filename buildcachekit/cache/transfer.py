"""
Selective build cache migration.

This module copies the cache entries a build plan needed from one cache
root to another. For every plan entry the action record named by its
ActionID is copied, parsed for the OutputID it points to, and the output
blob named by that OutputID is copied after it.

Entries that cannot be resolved are skipped and reported. An action ID
that is not base64 and any I/O failure abort the run. Files copied before an
abort stay in place.

Usage:
    from buildcachekit.cache.transfer import TransferOptions, migrate

    options = TransferOptions(
        from_base_dir=Path("/home/ci"),
        to_base_dir=Path("/workspace/home"),
        action_graph=Path("actiongraph.json"),
    )
    report = migrate(options)
    print(report.summary())
"""

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Iterable, List, Optional

from buildcachekit.cache.index import parse_index_record
from buildcachekit.cache.keys import (
    ACTION_SUFFIX,
    OUTPUT_SUFFIX,
    OutputID,
    decode_key_prefix,
)
from buildcachekit.cache.locator import CacheEntryLocator
from buildcachekit.core.directory import (
    DEFAULT_CACHE_SUBDIR,
    DEFAULT_TOOL,
    get_cache_root,
    verify_directory_writable,
)
from buildcachekit.core.exceptions import (
    CacheTransferError,
    EntryNotFoundError,
    KeyDecodeError,
    NoOutputIDError,
)
from buildcachekit.core.filesystem import (
    FilesystemError,
    atomic_write,
    copy_file,
    ensure_directory,
    file_size,
    format_size,
)
from buildcachekit.core.locking import destination_lock
from buildcachekit.plan.reader import BuildPlanEntry, filter_plan, load_plan

logger = logging.getLogger(__name__)


class EntryOutcome(Enum):
    """Terminal state of a single build plan entry."""

    COPIED = "copied"
    SKIPPED_NO_ACTION_ID = "no action ID"
    SKIPPED_NOT_FOUND = "not found"
    SKIPPED_NO_OUTPUT = "no output ID"
    FAILED = "failed"

    @property
    def is_skip(self) -> bool:
        return self.name.startswith("SKIPPED_")


@dataclass
class TransferStats:
    """Running totals of files and bytes copied."""

    files_copied: int = 0
    bytes_copied: int = 0

    def add(self, nbytes: int) -> None:
        self.files_copied += 1
        self.bytes_copied += nbytes


@dataclass
class EntryResult:
    """What happened to one build plan entry."""

    entry: BuildPlanEntry
    outcome: EntryOutcome
    files: int = 0
    nbytes: int = 0
    detail: str = ""


@dataclass
class TransferReport:
    """Aggregate result of a migration run."""

    stats: TransferStats = field(default_factory=TransferStats)
    outcomes: Counter = field(default_factory=Counter)
    skipped: List[EntryResult] = field(default_factory=list)
    entries_processed: int = 0
    dry_run: bool = False

    def record(self, result: EntryResult) -> None:
        self.entries_processed += 1
        self.outcomes[result.outcome] += 1
        if result.outcome.is_skip:
            self.skipped.append(result)

    def count(self, outcome: EntryOutcome) -> int:
        return self.outcomes.get(outcome, 0)

    def summary(self) -> str:
        """Single line describing the run."""
        verb = "Would copy" if self.dry_run else "Copied"
        parts = [
            f"{self.count(outcome)} {outcome.value}"
            for outcome in EntryOutcome
            if self.count(outcome)
        ]
        breakdown = ", ".join(parts) if parts else "nothing to do"
        return (
            f"{verb} {self.stats.files_copied} files "
            f"({format_size(self.stats.bytes_copied)}) "
            f"for {self.entries_processed} entries: {breakdown}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dry_run": self.dry_run,
            "entries_processed": self.entries_processed,
            "files_copied": self.stats.files_copied,
            "bytes_copied": self.stats.bytes_copied,
            "outcomes": {
                outcome.name.lower(): self.count(outcome) for outcome in EntryOutcome
            },
            "skipped": [
                {
                    "package": result.entry.package,
                    "mode": result.entry.mode,
                    "action_id": result.entry.action_id,
                    "reason": result.outcome.value,
                    "detail": result.detail,
                }
                for result in self.skipped
            ],
        }


@dataclass
class TransferOptions:
    """
    Validated settings for a migration run.

    Attributes:
        from_base_dir: Base directory holding the source cache
        to_base_dir: Base directory receiving the destination cache
        action_graph: Path to the build plan manifest
        tool: Build tool name used in the cache directory name
        cache_subdir: Cache directory template relative to a base directory
        need_build_only: Only migrate entries whose package needed building
        dry_run: Report what would be copied without writing anything
        lock_timeout: Seconds to wait for the destination lock
        json_report: Optional path to write the report as JSON
    """

    from_base_dir: Path
    to_base_dir: Path
    action_graph: Path = Path("actiongraph.json")
    tool: str = DEFAULT_TOOL
    cache_subdir: str = DEFAULT_CACHE_SUBDIR
    need_build_only: bool = False
    dry_run: bool = False
    lock_timeout: float = 30
    json_report: Optional[Path] = None

    @property
    def source_root(self) -> Path:
        return get_cache_root(self.from_base_dir, self.tool, self.cache_subdir)

    @property
    def destination_root(self) -> Path:
        return get_cache_root(self.to_base_dir, self.tool, self.cache_subdir)


class _EntryLogAdapter(logging.LoggerAdapter):
    """Prefixes messages with the package and mode of the current entry."""

    def process(self, msg, kwargs):
        return f"[{self.extra['package']} {self.extra['mode']}] {msg}", kwargs


class CacheTransferEngine:
    """
    Copies the cache entries of a build plan between two cache roots.

    Entries are processed one at a time in manifest order. The destination
    tree only ever receives new files.

    Example:
        >>> engine = CacheTransferEngine(src_root, dst_root)
        >>> report = engine.run(load_plan("actiongraph.json"))
        >>> report.stats.files_copied
        2
    """

    def __init__(
        self,
        source_root: Path,
        destination_root: Path,
        logger: Optional[logging.Logger] = None,
        dry_run: bool = False,
    ):
        """
        Initialize transfer engine.

        Args:
            source_root: Cache root to copy from
            destination_root: Cache root to copy into
            logger: Logger for diagnostics (default: this module's logger)
            dry_run: Resolve and parse entries without writing anything
        """
        self.source = CacheEntryLocator(source_root)
        self.destination_root = Path(destination_root)
        self.logger = logger or logging.getLogger(__name__)
        self.dry_run = dry_run
        self.stats = TransferStats()

    def prepare(self) -> None:
        """
        Create the destination root.

        Raises:
            CacheTransferError: If it is the source root, or cannot be created
                or written to
        """
        if self.destination_root.resolve() == self.source.cache_root.resolve():
            raise CacheTransferError(
                f"Destination cache {self.destination_root} is the source cache"
            )
        if self.dry_run:
            return
        try:
            ensure_directory(self.destination_root)
        except (OSError, FilesystemError) as e:
            raise CacheTransferError(
                f"Failed to create destination cache {self.destination_root}: {e}"
            ) from e
        if not verify_directory_writable(self.destination_root):
            raise CacheTransferError(
                f"Destination cache {self.destination_root} is not writable"
            )

    def _copy(self, relative: PurePosixPath) -> int:
        source = self.source.path(relative)
        if self.dry_run:
            nbytes = file_size(source)
        else:
            nbytes = copy_file(source, self.destination_root / relative)
        self.stats.add(nbytes)
        return nbytes

    def _read_output_id(self, relative: PurePosixPath) -> OutputID:
        # Parse the bytes just written, not the source they came from.
        if self.dry_run:
            path = self.source.path(relative)
        else:
            path = self.destination_root / relative
        with open(path, "rb") as fh:
            return parse_index_record(fh)

    def transfer_entry(self, entry: BuildPlanEntry) -> EntryResult:
        """
        Migrate the action record and output blob of one plan entry.

        Returns:
            The entry's result; never a FAILED one

        Raises:
            KeyDecodeError: If the action ID is not a base64 key or key prefix
            OSError: On I/O failure, which must abort the run
        """
        log = _EntryLogAdapter(
            self.logger, {"package": entry.package, "mode": entry.mode}
        )

        if not entry.action_id:
            log.warning("no action ID")
            return EntryResult(entry, EntryOutcome.SKIPPED_NO_ACTION_ID)

        key = decode_key_prefix(entry.action_id)

        try:
            action_file = self.source.locate(key, ACTION_SUFFIX)
        except EntryNotFoundError as e:
            log.warning(f"no file matched {e.searched}")
            return EntryResult(entry, EntryOutcome.SKIPPED_NOT_FOUND, detail=str(e))

        result = EntryResult(entry, EntryOutcome.COPIED)
        result.nbytes += self._copy(action_file)
        result.files += 1

        try:
            output_id = self._read_output_id(action_file)
        except NoOutputIDError as e:
            log.warning(f"no output file: {e.reason}")
            result.outcome = EntryOutcome.SKIPPED_NO_OUTPUT
            result.detail = str(e)
            return result

        try:
            output_file = self.source.locate_by_exact_key(output_id, OUTPUT_SUFFIX)
        except EntryNotFoundError as e:
            log.warning(f"output blob not found: {e.searched}")
            result.outcome = EntryOutcome.SKIPPED_NOT_FOUND
            result.detail = str(e)
            return result

        result.nbytes += self._copy(output_file)
        result.files += 1
        log.debug(f"copied {result.files} files ({result.nbytes} bytes)")
        return result

    def run(self, entries: Iterable[BuildPlanEntry]) -> TransferReport:
        """
        Migrate every entry of a build plan.

        Args:
            entries: Build plan entries, processed in order

        Returns:
            The aggregate report

        Raises:
            CacheTransferError: On the first invalid action ID or I/O failure;
                the report up to and including the failed entry is attached
        """
        self.stats = TransferStats()
        report = TransferReport(stats=self.stats, dry_run=self.dry_run)
        self.prepare()

        for entry in entries:
            try:
                result = self.transfer_entry(entry)
            except KeyDecodeError as e:
                report.record(EntryResult(entry, EntryOutcome.FAILED, detail=str(e)))
                raise CacheTransferError(
                    f"Invalid action ID for {entry.package}: {e}", report
                ) from e
            except OSError as e:
                report.record(EntryResult(entry, EntryOutcome.FAILED, detail=str(e)))
                raise CacheTransferError(
                    f"Failed to copy cache entry for {entry.package}: {e}", report
                ) from e
            report.record(result)

        self.logger.info(report.summary())
        return report


def write_report(report: TransferReport, path: Path) -> None:
    """Write a report as JSON, atomically."""
    atomic_write(path, json.dumps(report.to_dict(), indent=2) + "\n")
    logger.debug(f"Wrote transfer report to {path}")


def migrate(
    options: TransferOptions, logger: Optional[logging.Logger] = None
) -> TransferReport:
    """
    Run a complete migration described by options.

    Loads the build plan, takes the destination lock (except for dry
    runs), copies the entries and writes the optional JSON report.

    Raises:
        BuildPlanError: If the build plan cannot be loaded
        CacheTransferError: If the run must abort
    """
    entries = filter_plan(load_plan(options.action_graph), options.need_build_only)

    engine = CacheTransferEngine(
        options.source_root,
        options.destination_root,
        logger=logger,
        dry_run=options.dry_run,
    )

    try:
        if options.dry_run:
            report = engine.run(entries)
        else:
            with destination_lock(options.destination_root, options.lock_timeout):
                report = engine.run(entries)
    except CacheTransferError as e:
        if options.json_report and e.report is not None:
            write_report(e.report, options.json_report)
        raise

    if options.json_report:
        write_report(report, options.json_report)
    return report
