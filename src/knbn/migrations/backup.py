"""Pre-migration backups of board files."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"


def backup_path_for(path: Path) -> Path:
    """Return the sibling backup path, ``<name>.bak``."""
    return path.with_name(path.name + BACKUP_SUFFIX)


def create_backup(path: Path) -> Path:
    """Copy *path* byte for byte to ``<path>.bak``, replacing a stale backup.

    Raises:
        OSError: If the source cannot be read or the backup cannot be written.
    """
    backup_path = backup_path_for(path)
    shutil.copyfile(path, backup_path)
    logger.info("Backed up %s to %s", path, backup_path)
    return backup_path
