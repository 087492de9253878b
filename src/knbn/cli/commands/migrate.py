"""CLI command for migrating board files to the current schema.

Usage:
    knbn migrate board.knbn             # Migrate one board
    knbn migrate --all                  # Migrate every .knbn file here
    knbn migrate --all --dry-run        # Preview without writing
    knbn migrate a.knbn b.knbn --backup # Keep <file>.bak copies
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from typing_extensions import Annotated

from knbn.cli.helpers import (
    configure_logging,
    console,
    output_error,
    output_json,
    resolve_cwd,
)
from knbn.errors import ConfigurationError, MigrationError
from knbn.migrations import (
    STATUS_ERROR,
    STATUS_MIGRATED,
    BatchReport,
    get_migration_path,
    migrate_files,
)

_STATUS_STYLES = {
    STATUS_MIGRATED: "green",
    STATUS_ERROR: "red",
}


def _render_report(report: BatchReport, verbose: bool) -> None:
    if report.results:
        table = Table(title="Board Migration", show_lines=False, header_style="bold cyan")
        table.add_column("File", style="bright_white")
        table.add_column("Status")
        table.add_column("Versions", style="cyan")
        table.add_column("Message", style="dim")
        table.add_column("Backup")

        for result in report.results:
            style = _STATUS_STYLES.get(result.status, "yellow")
            versions = (
                f"{result.from_version} -> {result.to_version}"
                if result.from_version is not None
                else ""
            )
            table.add_row(
                escape(result.filename),
                f"[{style}]{result.status}[/{style}]",
                versions,
                escape(result.message),
                "yes" if result.backup_created else "",
            )
        console.print(table)
        console.print()

    if verbose:
        for result in report.results:
            if result.status != STATUS_MIGRATED or result.from_version is None:
                continue
            try:
                steps = get_migration_path(result.from_version)
            except MigrationError:
                continue
            console.print(f"[dim]{escape(result.filename)}:[/dim]")
            for step in steps:
                console.print(f"  [dim]{step.migration_id}: {step.description}[/dim]")
        console.print()

    if report.dry_run and report.results:
        console.print(
            Panel(
                "[yellow]DRY RUN[/yellow] - No changes were made",
                border_style="yellow",
            )
        )

    console.print(escape(report.summary))


def migrate(
    files: Annotated[
        Optional[List[str]],
        typer.Argument(help="Board files to migrate (e.g. board1.knbn board2.knbn)"),
    ] = None,
    all_files: Annotated[
        bool, typer.Option("--all", help="Migrate all .knbn files in the working directory")
    ] = False,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Show what would be migrated without making changes")
    ] = False,
    backup: Annotated[
        bool, typer.Option("--backup", help="Create <file>.bak copies before migrating")
    ] = False,
    cwd: Annotated[
        Optional[Path],
        typer.Option(
            "--cwd",
            envvar="KNBN_CWD",
            help="Working directory for file names and --all (defaults to the current directory)",
            file_okay=False,
            dir_okay=True,
            exists=True,
        ),
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output the report as JSON")] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show migration steps and debug logging")
    ] = False,
) -> None:
    """Migrate board files to the latest schema version.

    Each file is processed on its own: a missing or broken file is reported
    and the remaining files are still migrated. Files already at the latest
    version are left untouched.

    Examples:
        knbn migrate .knbn
        knbn migrate --all --dry-run
        knbn migrate board.knbn --backup
    """
    configure_logging(verbose)

    try:
        report = migrate_files(
            files or None,
            all_files=all_files,
            dry_run=dry_run,
            backup=backup,
            cwd=resolve_cwd(cwd),
        )
    except ConfigurationError as exc:
        output_error(json_output, str(exc))
        raise typer.Exit(1)

    if json_output:
        output_json(report.to_dict())
    else:
        _render_report(report, verbose)

    if report.error_count:
        raise typer.Exit(1)
