"""Board file I/O: YAML codec, discovery, load and atomic save.

Board files are UTF-8 YAML documents whose names end in ``.knbn``. The
bare name ``.knbn`` is the default board of a directory.
"""

from __future__ import annotations

import io
import logging
import os
import tempfile
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from knbn.board.models import Board, format_timestamp
from knbn.errors import MalformedDocumentError

logger = logging.getLogger(__name__)

BOARD_FILE_EXTENSION = ".knbn"
DEFAULT_BOARD_FILENAME = ".knbn"


def is_board_filename(name: str) -> bool:
    """Return True when *name* carries the board file extension.

    ``Path.suffix`` is empty for the dotfile ``.knbn`` so the check is done on
    the raw name.
    """
    return name.endswith(BOARD_FILE_EXTENSION)


def find_board_files(directory: Path) -> list[Path]:
    """Return every board file directly inside *directory*, sorted by name."""
    return sorted(
        (
            entry
            for entry in directory.iterdir()
            if entry.is_file() and is_board_filename(entry.name)
        ),
        key=lambda entry: entry.name,
    )


# ---------------------------------------------------------------------------
# YAML codec
# ---------------------------------------------------------------------------


def parse_document(text: str) -> Any:
    """Decode YAML *text* into plain Python values.

    Raises:
        MalformedDocumentError: If the text is not valid YAML.
    """
    yaml = YAML(typ="safe")
    try:
        return yaml.load(text)
    except YAMLError as exc:
        raise MalformedDocumentError(f"Invalid YAML: {exc}") from exc


def dump_document(data: dict[str, Any]) -> str:
    """Encode *data* as block-style YAML, keeping key order."""
    yaml = YAML()
    yaml.default_flow_style = False
    buffer = io.StringIO()
    yaml.dump(data, buffer)
    return buffer.getvalue()


def read_document(path: Path) -> Any:
    """Read *path* as UTF-8 and decode it.

    Raises:
        FileNotFoundError: If *path* does not exist.
        MalformedDocumentError: If the bytes are not UTF-8 or not YAML.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedDocumentError(f"{path.name} is not UTF-8 text") from exc
    return parse_document(text)


# ---------------------------------------------------------------------------
# Load / save
# ---------------------------------------------------------------------------


def load_board(path: Path) -> Board:
    """Load the board at *path* in the current schema.

    Older documents are migrated in memory; the file itself is left
    untouched. Use ``knbn migrate`` to persist the upgrade.
    """
    # Lazy import: the migration chain builds on this module's codec
    from knbn.migrations.chain import migrate_board

    return migrate_board(read_document(path))


def load_board_fields(path: Path, fields: Iterable[str]) -> dict[str, Any]:
    """Return only the requested top-level *fields* of the board at *path*."""
    data = load_board(path).to_dict()
    return {name: data[name] for name in fields if name in data}


def _write_text_atomic(path: Path, text: str) -> None:
    """Write *text* to *path* via a temp file in the same directory."""
    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except Exception:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def save_board(path: Path, board: Board, *, now: datetime | None = None) -> Board:
    """Stamp ``dates.saved`` and persist *board* to *path* atomically.

    Returns:
        The board as written, carrying the new saved timestamp.
    """
    saved_at = format_timestamp(now or datetime.now(timezone.utc))
    stamped = replace(board, dates=replace(board.dates, saved=saved_at))
    path.parent.mkdir(parents=True, exist_ok=True)
    _write_text_atomic(path, dump_document(stamped.to_dict()))
    logger.debug("Saved board %r to %s", stamped.name, path)
    return stamped
