"""Tests for the migration registry, the 0.1 -> 0.2 step and the chain."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from knbn.board.models import Board
from knbn.errors import (
    MalformedDocumentError,
    MigrationStepError,
    UnsupportedVersionError,
)
from knbn.migrations import (
    CURRENT_VERSION,
    BaseMigration,
    MigrationRegistry,
    get_migration_path,
    migrate_board,
    migrate_document,
)
from knbn.migrations.steps.m_0_1_flatten_configuration import FlattenConfigurationMigration


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestRegistry:
    def test_legacy_step_is_registered(self):
        migration = MigrationRegistry.get("0.1")
        assert isinstance(migration, FlattenConfigurationMigration)
        assert migration.migration_id == "0.1->0.2"

    def test_unknown_source_returns_none(self):
        assert MigrationRegistry.get("0.2") is None

    def test_conflicting_source_version_rejected(self, registry_restore):
        class Duplicate(BaseMigration):
            source_version = "0.1"
            target_version = "0.2"

            def apply(self, document):
                return document

        with pytest.raises(ValueError, match="both start from version 0.1"):
            MigrationRegistry.register(Duplicate)

    def test_versions_required(self, registry_restore):
        class Unversioned(BaseMigration):
            def apply(self, document):
                return document

        with pytest.raises(ValueError, match="must set source_version"):
            MigrationRegistry.register(Unversioned)

    def test_get_all_sorted_by_source_version(self, registry_restore):
        @MigrationRegistry.register
        class Older(BaseMigration):
            source_version = "0.0.9"
            target_version = "0.1"

            def apply(self, document):
                return document

        assert MigrationRegistry.source_versions() == ["0.0.9", "0.1"]


# ---------------------------------------------------------------------------
# 0.1 -> 0.2 step
# ---------------------------------------------------------------------------


class TestFlattenConfigurationStep:
    def test_minimal_board(self, legacy_data):
        migrated = FlattenConfigurationMigration().apply(legacy_data)

        assert migrated == {
            "name": "Test Board",
            "description": "Test board description",
            "columns": [{"name": "To Do"}, {"name": "In Progress"}, {"name": "Done"}],
            "tasks": {},
            "labels": [],
            "sprints": [],
            "metadata": {"nextId": 1, "version": "0.2"},
            "dates": {
                "created": "2024-01-01T00:00:00.000Z",
                "updated": "2024-01-02T00:00:00.000Z",
                "saved": "2024-01-02T00:00:00.000Z",
            },
        }

    def test_tasks_sprints_and_labels(self, legacy_data):
        legacy_data["configuration"]["labels"] = ["bug", {"name": "feature", "color": "blue"}]
        legacy_data["tasks"] = {
            "3": {
                "id": 3,
                "title": "Write docs",
                "column": "To Do",
                "labels": ["bug"],
                "storyPoints": 2,
                "sprint": "Sprint 1",
                "createdAt": "2024-01-01T10:00:00.000Z",
                "updatedAt": "2024-01-01T11:00:00.000Z",
            },
            "4": {
                "title": "Backlog item",
                "dates": {"created": "2024-01-01T12:00:00.000Z", "updated": "2024-01-01T12:00:00.000Z"},
            },
        }
        legacy_data["sprints"] = {
            "Sprint 1": {"description": "first", "capacity": 10, "startDate": "2024-01-01"},
        }
        del legacy_data["metadata"]["nextId"]

        migrated = FlattenConfigurationMigration().apply(legacy_data)

        assert migrated["labels"] == [{"name": "bug"}, {"name": "feature", "color": "blue"}]
        assert migrated["tasks"]["3"] == {
            "id": 3,
            "title": "Write docs",
            "column": "To Do",
            "labels": ["bug"],
            "storyPoints": 2,
            "sprint": "Sprint 1",
            "dates": {
                "created": "2024-01-01T10:00:00.000Z",
                "updated": "2024-01-01T11:00:00.000Z",
            },
        }
        assert migrated["tasks"]["4"]["id"] == 4
        assert migrated["tasks"]["4"]["column"] == ""
        assert migrated["sprints"] == [
            {
                "name": "Sprint 1",
                "description": "first",
                "capacity": 10,
                "dates": {"created": "2024-01-01T00:00:00.000Z", "starts": "2024-01-01"},
            }
        ]
        assert migrated["metadata"]["nextId"] == 5

    def test_input_is_not_mutated(self, legacy_data):
        legacy_data["tasks"] = {"1": {"id": 1, "title": "t", "labels": ["a"]}}
        before = copy.deepcopy(legacy_data)

        migrated = FlattenConfigurationMigration().apply(legacy_data)
        migrated["tasks"]["1"]["labels"].append("b")

        assert legacy_data == before

    def test_bare_string_task_label_becomes_single_label(self, legacy_data):
        legacy_data["tasks"] = {"1": {"id": 1, "title": "t", "labels": "bug"}}

        board = migrate_board(legacy_data)

        assert board.tasks["1"].labels == ["bug"]

    def test_explicit_next_id_never_below_existing_tasks(self, legacy_data):
        legacy_data["tasks"] = {"5": {"id": 5, "title": "t"}}
        legacy_data["metadata"]["nextId"] = 1

        migrated = FlattenConfigurationMigration().apply(legacy_data)

        assert migrated["metadata"]["nextId"] == 6

    def test_explicit_next_id_above_tasks_is_kept(self, legacy_data):
        legacy_data["tasks"] = {"2": {"id": 2, "title": "t"}}
        legacy_data["metadata"]["nextId"] = 10

        migrated = FlattenConfigurationMigration().apply(legacy_data)

        assert migrated["metadata"]["nextId"] == 10

    @pytest.mark.parametrize(
        "mutate, reason",
        [
            (lambda d: d.pop("configuration"), "missing configuration section"),
            (lambda d: d["configuration"].pop("name"), "no board name"),
            (lambda d: d["configuration"].update(columns="To Do"), "columns is not a list"),
            (lambda d: d.update(tasks=["a"]), "tasks is not a mapping"),
            (lambda d: d.update(tasks={"x": {"title": "t"}}), "no numeric id"),
            (lambda d: d.update(tasks={"1": {"id": 1}}), "has no title"),
            (
                lambda d: d.update(tasks={"1": {"id": 1, "title": "first"}, "2": {"id": 1, "title": "second"}}),
                "duplicate task id 1",
            ),
            (
                lambda d: d.update(tasks={"1": {"id": 1, "title": "t", "labels": {"name": "bug"}}}),
                "labels is not a list",
            ),
            (
                lambda d: d.update(tasks={"1": {"id": 1, "title": "t", "labels": [{"name": "bug"}]}}),
                "unrecognized label",
            ),
            (lambda d: d.update(sprints="Sprint 1"), "neither a mapping nor a list"),
            (
                lambda d: [d["metadata"].pop("createdAt"), d["metadata"].pop("lastModified")],
                "neither createdAt nor lastModified",
            ),
        ],
    )
    def test_structural_violations_raise(self, legacy_data, mutate, reason):
        mutate(legacy_data)
        with pytest.raises(MigrationStepError, match=reason):
            FlattenConfigurationMigration().apply(legacy_data)


# ---------------------------------------------------------------------------
# Chain
# ---------------------------------------------------------------------------


class TestChain:
    def test_current_version_constant(self):
        assert CURRENT_VERSION == "0.2"

    def test_migration_path(self):
        assert [m.migration_id for m in get_migration_path("0.1")] == ["0.1->0.2"]
        assert get_migration_path(CURRENT_VERSION) == []

    def test_migrate_board_returns_typed_board(self, legacy_data):
        board = migrate_board(legacy_data)

        assert isinstance(board, Board)
        assert board.name == "Test Board"
        assert board.metadata.version == "0.2"
        assert board.column_names() == ["To Do", "In Progress", "Done"]
        assert board.dates.created == "2024-01-01T00:00:00.000Z"

    def test_deterministic(self, legacy_data):
        assert migrate_document(legacy_data) == migrate_document(legacy_data)

    def test_current_document_passes_through(self, current_data):
        assert migrate_document(current_data) is current_data

    def test_newer_version_unsupported(self):
        with pytest.raises(UnsupportedVersionError, match="newer than the supported version 0.2") as exc_info:
            migrate_document({"metadata": {"version": "999.0.0"}, "configuration": {}, "tasks": {}})
        assert exc_info.value.version == "999.0.0"

    def test_older_version_unsupported(self):
        with pytest.raises(UnsupportedVersionError, match="older than the oldest supported version 0.1"):
            migrate_document({"metadata": {"version": "0.0.1"}})

    def test_unrecognized_version(self):
        with pytest.raises(UnsupportedVersionError, match="Unrecognized board version 'banana'"):
            migrate_document({"metadata": {"version": "banana"}})

    def test_malformed_input(self):
        with pytest.raises(MalformedDocumentError):
            migrate_document({"name": "No Version"})

    def test_current_but_incomplete_board_is_malformed(self):
        with pytest.raises(MalformedDocumentError, match="invalid board structure"):
            migrate_board({"metadata": {"version": "0.2", "nextId": 1}})

    def test_current_board_with_non_list_task_labels_is_malformed(self, current_data):
        current_data["tasks"] = {
            "1": {
                "id": 1,
                "title": "t",
                "column": "To Do",
                "labels": "bug",
                "dates": {"created": "2024-01-01T00:00:00.000Z", "updated": "2024-01-01T00:00:00.000Z"},
            }
        }

        with pytest.raises(MalformedDocumentError, match="task labels must be a list"):
            migrate_board(current_data)

    def test_step_must_reach_its_target_version(self, registry_restore):
        @MigrationRegistry.register
        class Stuck(BaseMigration):
            source_version = "0.0.5"
            target_version = "0.1"

            def apply(self, document: dict[str, Any]) -> dict[str, Any]:
                return copy.deepcopy(document)

        with pytest.raises(MigrationStepError, match="produced version 0.0.5, expected 0.1"):
            migrate_document({"metadata": {"version": "0.0.5"}})

    def test_multi_step_chain(self, registry_restore, legacy_data):
        @MigrationRegistry.register
        class Ancient(BaseMigration):
            source_version = "0.0.5"
            target_version = "0.1"

            def apply(self, document: dict[str, Any]) -> dict[str, Any]:
                migrated = copy.deepcopy(document)
                migrated["configuration"] = {
                    "name": migrated.pop("title"),
                    "columns": migrated.pop("lanes"),
                }
                migrated["metadata"]["version"] = "0.1"
                return migrated

        ancient = {
            "title": "Old Board",
            "lanes": ["Todo", "Done"],
            "metadata": {"version": "0.0.5", "createdAt": "2023-05-01T00:00:00.000Z"},
        }

        assert [m.migration_id for m in get_migration_path("0.0.5")] == ["0.0.5->0.1", "0.1->0.2"]
        board = migrate_board(ancient)
        assert board.name == "Old Board"
        assert board.column_names() == ["Todo", "Done"]
        assert board.metadata.version == "0.2"
