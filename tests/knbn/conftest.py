from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from knbn.migrations import MigrationRegistry


def legacy_board_data(name: str = "Test Board") -> dict[str, Any]:
    """A minimal board in the 0.1 layout."""
    return {
        "configuration": {
            "name": name,
            "description": "Test board description",
            "columns": ["To Do", "In Progress", "Done"],
        },
        "tasks": {},
        "sprints": {},
        "metadata": {
            "nextId": 1,
            "version": "0.1",
            "createdAt": "2024-01-01T00:00:00.000Z",
            "lastModified": "2024-01-02T00:00:00.000Z",
        },
    }


def current_board_data(name: str = "Current Board") -> dict[str, Any]:
    """A minimal board in the 0.2 layout."""
    return {
        "name": name,
        "description": "Already current",
        "columns": [{"name": "To Do"}, {"name": "In Progress"}, {"name": "Done"}],
        "tasks": {},
        "labels": [],
        "sprints": [],
        "metadata": {"nextId": 1, "version": "0.2"},
        "dates": {
            "created": "2024-01-01T00:00:00.000Z",
            "updated": "2024-01-01T00:00:00.000Z",
            "saved": "2024-01-01T00:00:00.000Z",
        },
    }


def write_json(path: Path, data: Any) -> Path:
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def legacy_data() -> dict[str, Any]:
    return legacy_board_data()


@pytest.fixture
def current_data() -> dict[str, Any]:
    return current_board_data()


@pytest.fixture
def write_board(tmp_path: Path) -> Callable[[str, Any], Path]:
    """Write arbitrary JSON content as a board file in ``tmp_path``."""

    def _write(filename: str, data: Any) -> Path:
        return write_json(tmp_path / filename, data)

    return _write


@pytest.fixture
def write_legacy_board(tmp_path: Path) -> Callable[..., Path]:
    def _write(filename: str = "test.knbn", **kwargs: Any) -> Path:
        return write_json(tmp_path / filename, legacy_board_data(**kwargs))

    return _write


@pytest.fixture
def write_current_board(tmp_path: Path) -> Callable[..., Path]:
    def _write(filename: str = "current.knbn", **kwargs: Any) -> Path:
        return write_json(tmp_path / filename, current_board_data(**kwargs))

    return _write


@pytest.fixture
def registry_restore():
    original = MigrationRegistry._migrations.copy()
    yield
    MigrationRegistry._migrations = original
