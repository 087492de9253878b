"""Versioned migration engine for knbn board files.

Public API surface -- all consumers import from this package.
"""

from __future__ import annotations

from .backup import BACKUP_SUFFIX, backup_path_for, create_backup
from .base import BaseMigration
from .batch import (
    STATUS_ERROR,
    STATUS_MIGRATED,
    STATUS_SKIPPED,
    BatchReport,
    FileMigrationResult,
    migrate_file,
    migrate_files,
    render_summary,
)
from .chain import CURRENT_VERSION, get_migration_path, migrate_board, migrate_document
from .detector import detect_version
from .registry import MigrationRegistry

__all__ = [
    "BACKUP_SUFFIX",
    "BaseMigration",
    "BatchReport",
    "CURRENT_VERSION",
    "FileMigrationResult",
    "MigrationRegistry",
    "STATUS_ERROR",
    "STATUS_MIGRATED",
    "STATUS_SKIPPED",
    "backup_path_for",
    "create_backup",
    "detect_version",
    "get_migration_path",
    "migrate_board",
    "migrate_document",
    "migrate_file",
    "migrate_files",
    "render_summary",
]
