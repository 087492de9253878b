"""Shared console and output helpers for the knbn CLI."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from rich.console import Console

console = Console()


def configure_logging(verbose: bool) -> None:
    """Route library log records to stderr when --verbose is given."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


def resolve_cwd(cwd: Path | None) -> Path:
    return (cwd or Path.cwd()).resolve()


def output_json(data: dict[str, Any]) -> None:
    print(json.dumps(data, indent=2))


def output_error(json_mode: bool, error_message: str) -> None:
    """Output error in JSON or human-readable format."""
    if json_mode:
        print(json.dumps({"error": error_message}))
    else:
        console.print(f"[red]Error:[/red] {error_message}")
