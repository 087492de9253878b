"""Board model and board file I/O."""

from .files import (
    BOARD_FILE_EXTENSION,
    DEFAULT_BOARD_FILENAME,
    dump_document,
    find_board_files,
    is_board_filename,
    load_board,
    load_board_fields,
    parse_document,
    read_document,
    save_board,
)
from .models import (
    Board,
    BoardDates,
    BoardMetadata,
    Column,
    Label,
    Sprint,
    SprintDates,
    Task,
    TaskDates,
)

__all__ = [
    "BOARD_FILE_EXTENSION",
    "Board",
    "BoardDates",
    "BoardMetadata",
    "Column",
    "DEFAULT_BOARD_FILENAME",
    "Label",
    "Sprint",
    "SprintDates",
    "Task",
    "TaskDates",
    "dump_document",
    "find_board_files",
    "is_board_filename",
    "load_board",
    "load_board_fields",
    "parse_document",
    "read_document",
    "save_board",
]
