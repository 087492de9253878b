"""Migration chain: compose registered steps up to the current schema.

Each step is looked up by the version tag the document currently carries,
applied, and the resulting tag checked before moving on. Steps never touch
the filesystem; callers decide whether to persist the result.
"""

from __future__ import annotations

import logging
from typing import Any

from packaging.version import InvalidVersion, Version

from knbn.board.models import Board
from knbn.errors import (
    MalformedDocumentError,
    MigrationStepError,
    UnsupportedVersionError,
)

from . import steps  # noqa: F401  (registers steps)
from .base import BaseMigration
from .detector import detect_version
from .registry import MigrationRegistry

logger = logging.getLogger(__name__)

CURRENT_VERSION = "0.2"


def _unsupported(version: str) -> UnsupportedVersionError:
    try:
        parsed = Version(version)
    except InvalidVersion:
        return UnsupportedVersionError(version, f"Unrecognized board version '{version}'")

    if parsed > Version(CURRENT_VERSION):
        detail = f"newer than the supported version {CURRENT_VERSION}"
    else:
        known = MigrationRegistry.source_versions()
        if known and parsed < Version(known[0]):
            detail = f"older than the oldest supported version {known[0]}"
        else:
            detail = "no migration registered for it"
    return UnsupportedVersionError(version, f"Unsupported board version {version} ({detail})")


def get_migration_path(version: str) -> list[BaseMigration]:
    """Return the ordered steps that take *version* to ``CURRENT_VERSION``.

    Returns an empty list for documents that are already current.

    Raises:
        UnsupportedVersionError: If the chain has no step for a version
            along the way.
    """
    path: list[BaseMigration] = []
    seen: set[str] = set()
    while version != CURRENT_VERSION:
        migration = MigrationRegistry.get(version)
        if migration is None:
            raise _unsupported(version)
        if version in seen:
            raise MigrationStepError(migration.migration_id, "migration cycle detected")
        seen.add(version)
        path.append(migration)
        version = migration.target_version
    return path


def migrate_document(raw: Any) -> dict[str, Any]:
    """Run the chain over a raw document and return it at ``CURRENT_VERSION``.

    The input is left untouched. An already-current document is returned
    as is.

    Raises:
        MalformedDocumentError: If *raw* carries no version tag.
        UnsupportedVersionError: If no path leads from its version to current.
        MigrationStepError: If a step rejects the document or does not
            produce its declared target version.
    """
    version = detect_version(raw)
    document: dict[str, Any] = raw

    for migration in get_migration_path(version):
        logger.debug("Applying migration %s: %s", migration.migration_id, migration.description)
        document = migration.apply(document)
        try:
            produced = detect_version(document)
        except MalformedDocumentError as exc:
            raise MigrationStepError(migration.migration_id, str(exc)) from exc
        if produced != migration.target_version:
            raise MigrationStepError(
                migration.migration_id,
                f"produced version {produced}, expected {migration.target_version}",
            )

    return document


def migrate_board(raw: Any) -> Board:
    """Run the chain over *raw* and build the typed board.

    Raises:
        MalformedDocumentError: If *raw* has no version, or is already
            current but lacks required board fields.
        UnsupportedVersionError: See :func:`migrate_document`.
        MigrationStepError: See :func:`migrate_document`, or when a step's
            output lacks required board fields.
    """
    original_version = detect_version(raw)
    document = migrate_document(raw)
    try:
        return Board.from_dict(document)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        reason = f"invalid board structure ({type(exc).__name__}: {exc})"
        if original_version == CURRENT_VERSION:
            raise MalformedDocumentError(reason) from exc
        raise MigrationStepError(f"{original_version} -> {CURRENT_VERSION}", reason) from exc
