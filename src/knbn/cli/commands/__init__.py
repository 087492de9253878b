"""CLI command modules for knbn."""

from .boards import list_boards
from .migrate import migrate

__all__ = ["list_boards", "migrate"]
