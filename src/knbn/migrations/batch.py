"""Batch migration of board files.

Applies version detection and the migration chain to a set of board
files, one file at a time.

Key invariants:
- Per-file isolation: any failure on one file is recorded on its result
  and processing continues with the next file.
- Files already at ``CURRENT_VERSION`` are never rewritten or backed up.
- Dry runs write nothing: no migrated file and no backup.
- Backups are taken before the write, and a failed backup stops that
  file's write.
- ``migrated + skipped + errors`` always equals the number of files
  resolved for the batch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

from knbn.board.files import (
    BOARD_FILE_EXTENSION,
    find_board_files,
    read_document,
    save_board,
)
from knbn.errors import ConfigurationError, MalformedDocumentError, MigrationError

from .backup import create_backup
from .chain import CURRENT_VERSION, migrate_board
from .detector import detect_version

logger = logging.getLogger(__name__)

STATUS_MIGRATED = "migrated"
STATUS_SKIPPED = "skipped"
STATUS_ERROR = "error"


# ---------------------------------------------------------------------------
# Result dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FileMigrationResult:
    """Per-file migration outcome."""

    filename: str
    status: str  # "migrated", "skipped", "error"
    message: str
    from_version: str | None = None
    to_version: str | None = None
    backup_created: bool = False

    def __post_init__(self) -> None:
        if (self.from_version is None) != (self.to_version is None):
            raise ValueError("from_version and to_version must be set together")

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "filename": self.filename,
            "status": self.status,
            "message": self.message,
            "backup_created": self.backup_created,
        }
        if self.from_version is not None:
            d["from_version"] = self.from_version
            d["to_version"] = self.to_version
        return d


@dataclass
class BatchReport:
    """Aggregate outcome of one batch call, in processing order."""

    dry_run: bool = False
    results: list[FileMigrationResult] = field(default_factory=list)
    migrated_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    summary: str = ""

    def add(self, result: FileMigrationResult) -> None:
        self.results.append(result)
        if result.status == STATUS_MIGRATED:
            self.migrated_count += 1
        elif result.status == STATUS_SKIPPED:
            self.skipped_count += 1
        else:
            self.error_count += 1

    @property
    def total(self) -> int:
        return self.migrated_count + self.skipped_count + self.error_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "migrated_count": self.migrated_count,
            "skipped_count": self.skipped_count,
            "error_count": self.error_count,
            "dry_run": self.dry_run,
            "results": [r.to_dict() for r in self.results],
            "summary": self.summary,
        }


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


def render_summary(report: BatchReport) -> str:
    """Render the human-readable multi-line summary of *report*."""
    lines = ["Migration Summary:"]
    if report.dry_run:
        lines.append(f"  Would migrate: {report.migrated_count} files")
    else:
        lines.append(f"  Migrated: {report.migrated_count} files")
    lines.append(f"  Already current: {report.skipped_count} files")
    if report.error_count > 0:
        lines.append(f"  Errors: {report.error_count} files")

    summary = "\n".join(lines)
    if report.dry_run and report.migrated_count > 0:
        summary += "\n\nRun without --dry-run to perform the migration."
    return summary


# ---------------------------------------------------------------------------
# Per-file processing
# ---------------------------------------------------------------------------


def migrate_file(
    path: Path,
    *,
    filename: str | None = None,
    dry_run: bool = False,
    backup: bool = False,
) -> FileMigrationResult:
    """Migrate a single board file and describe the outcome.

    Never raises for per-file problems: missing files, malformed content,
    unsupported versions and I/O failures all come back as ``error``
    results.

    Args:
        path: Absolute path of the board file.
        filename: Name to report (defaults to ``path.name``).
        dry_run: When True, compute the outcome but write nothing.
        backup: When True, copy the original to ``<name>.bak`` before writing.
    """
    name = filename or path.name

    if not path.exists():
        logger.warning("Board file not found: %s", path)
        return FileMigrationResult(name, STATUS_ERROR, f"File not found: {name}")

    try:
        raw = read_document(path)
        from_version = detect_version(raw)
    except MalformedDocumentError as exc:
        logger.warning("Invalid board file %s: %s", path, exc)
        return FileMigrationResult(name, STATUS_ERROR, f"Invalid board file format: {name}")
    except OSError as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return FileMigrationResult(name, STATUS_ERROR, f"Migration failed - {exc}")

    if from_version == CURRENT_VERSION:
        logger.debug("%s already at version %s", name, from_version)
        return FileMigrationResult(
            name,
            STATUS_SKIPPED,
            f"Already at latest version ({from_version})",
            from_version=from_version,
            to_version=from_version,
        )

    try:
        board = migrate_board(raw)
    except MigrationError as exc:
        logger.warning("Cannot migrate %s: %s", path, exc)
        return FileMigrationResult(name, STATUS_ERROR, f"Migration failed - {exc}")
    except Exception as exc:
        logger.warning("Unexpected failure migrating %s", path, exc_info=True)
        return FileMigrationResult(name, STATUS_ERROR, f"Migration failed - {exc}")

    to_version = board.metadata.version

    if dry_run:
        return FileMigrationResult(
            name,
            STATUS_MIGRATED,
            f"Would migrate from {from_version} to {to_version}",
            from_version=from_version,
            to_version=to_version,
        )

    backup_created = False
    try:
        if backup:
            create_backup(path)
            backup_created = True
        save_board(path, board)
    except OSError as exc:
        logger.warning("Failed to write migrated board %s: %s", path, exc)
        return FileMigrationResult(name, STATUS_ERROR, f"Migration failed - {exc}")

    logger.info("Migrated %s from %s to %s", path, from_version, to_version)
    return FileMigrationResult(
        name,
        STATUS_MIGRATED,
        f"Migrated from {from_version} to {to_version}",
        from_version=from_version,
        to_version=to_version,
        backup_created=backup_created,
    )


# ---------------------------------------------------------------------------
# Batch entry point
# ---------------------------------------------------------------------------


def resolve_targets(
    files: Sequence[str] | None,
    all_files: bool,
    cwd: Path,
) -> list[tuple[str, Path]]:
    """Resolve the batch working set as ``(reported name, path)`` pairs.

    Raises:
        ConfigurationError: Unless exactly one of a non-empty *files* list
            or *all_files* is given.
    """
    if all_files and files:
        raise ConfigurationError("Specify either a files list or the all flag, not both")
    if all_files:
        return [(path.name, path) for path in find_board_files(cwd)]
    if not files:
        raise ConfigurationError("Either files array or all flag must be specified")
    return [(name, cwd / name) for name in files]


def migrate_files(
    files: Sequence[str] | None = None,
    *,
    all_files: bool = False,
    dry_run: bool = False,
    backup: bool = False,
    cwd: Path | None = None,
) -> BatchReport:
    """Migrate board files to ``CURRENT_VERSION``.

    Args:
        files: Board file names or paths; relative ones resolve against *cwd*.
        all_files: Migrate every ``.knbn`` file directly inside *cwd* instead.
        dry_run: Report what would change without writing anything.
        backup: Copy each file to ``<name>.bak`` before overwriting it.
        cwd: Working directory (defaults to the process working directory).

    Returns:
        BatchReport with one result per resolved file. Per-file failures are
        reported there and never raised.

    Raises:
        ConfigurationError: If the target set is not specified correctly.
            Raised before any file is touched.
    """
    working_dir = (cwd or Path.cwd()).resolve()
    targets = resolve_targets(files, all_files, working_dir)

    report = BatchReport(dry_run=dry_run)

    if not targets:
        report.summary = f"No {BOARD_FILE_EXTENSION} files found in current directory"
        return report

    for name, path in targets:
        report.add(migrate_file(path, filename=name, dry_run=dry_run, backup=backup))

    report.summary = render_summary(report)
    logger.debug(
        "Batch finished: %d migrated, %d skipped, %d errors",
        report.migrated_count,
        report.skipped_count,
        report.error_count,
    )
    return report
