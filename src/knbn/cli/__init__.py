"""knbn command line entry point."""

from __future__ import annotations

from typing import Optional

import typer
from typing_extensions import Annotated

from knbn import __version__
from knbn.cli.commands import list_boards, migrate
from knbn.cli.helpers import console

app = typer.Typer(
    name="knbn",
    help="Kanban boards in plain .knbn files",
    add_completion=False,
    no_args_is_help=True,
)

app.command(name="migrate")(migrate)
app.command(name="list")(list_boards)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"knbn {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit"),
    ] = None,
) -> None:
    """Kanban boards in plain .knbn files."""


def main() -> None:
    app()


if __name__ == "__main__":
    main()
