"""knbn - kanban boards in plain ``.knbn`` files, with schema migrations."""

__version__ = "0.2.0"
