"""CLI command listing the board files of a directory."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table
from typing_extensions import Annotated

from knbn.board.files import find_board_files, load_board_fields
from knbn.cli.helpers import console, output_json, resolve_cwd
from knbn.errors import MigrationError

NO_NAME = " -- No Name -- "
LOAD_ERROR = " -- Error loading board -- "


def _board_name(path: Path) -> str:
    try:
        fields = load_board_fields(path, ["name"])
    except (MigrationError, OSError):
        return LOAD_ERROR
    return fields.get("name") or NO_NAME


def list_boards(
    cwd: Annotated[
        Optional[Path],
        typer.Option(
            "--cwd",
            envvar="KNBN_CWD",
            help="Directory to scan (defaults to the current directory)",
            file_okay=False,
            dir_okay=True,
            exists=True,
        ),
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """List all .knbn board files in the working directory."""
    directory = resolve_cwd(cwd)
    boards = [
        {"filename": path.name, "board_name": _board_name(path)}
        for path in find_board_files(directory)
    ]

    if json_output:
        output_json({"boards": boards})
        return

    if not boards:
        console.print("[yellow]No .knbn files found in current directory[/yellow]")
        return

    table = Table(title="Boards", header_style="bold cyan")
    table.add_column("File", style="bright_white")
    table.add_column("Board")
    for board in boards:
        table.add_row(escape(board["filename"]), escape(board["board_name"]))
    console.print(table)
