"""Migration: 0.1 boards to the flat 0.2 layout.

Version 0.1 kept the board name, description and columns under a
``configuration`` section, stored columns as bare strings, keyed sprints
by name and kept board timestamps inside ``metadata``. Version 0.2 lifts
those fields to the top level, turns columns and labels into records,
stores sprints as a list and moves timestamps into a ``dates`` block.
"""

from __future__ import annotations

import copy
from typing import Any, NoReturn

from knbn.errors import MigrationStepError

from ..base import BaseMigration
from ..registry import MigrationRegistry

_TASK_FIELDS = ("description", "priority", "storyPoints", "sprint")


@MigrationRegistry.register
class FlattenConfigurationMigration(BaseMigration):
    """Lift ``configuration`` to the top level and add the ``dates`` block."""

    source_version = "0.1"
    target_version = "0.2"
    description = "Flatten board configuration and move timestamps into dates"

    def apply(self, document: dict[str, Any]) -> dict[str, Any]:
        configuration = document.get("configuration")
        if not isinstance(configuration, dict):
            self._fail("missing configuration section")

        name = configuration.get("name")
        if name is None or str(name).strip() == "":
            self._fail("configuration has no board name")

        metadata = document.get("metadata") or {}
        board_dates = self._board_dates(metadata)
        tasks = self._tasks(document.get("tasks"), board_dates["created"])

        migrated: dict[str, Any] = {"name": str(name)}
        if configuration.get("description") is not None:
            migrated["description"] = configuration["description"]
        migrated["columns"] = self._columns(configuration.get("columns"))
        migrated["tasks"] = tasks
        migrated["labels"] = self._labels(
            configuration.get("labels", document.get("labels"))
        )
        migrated["sprints"] = self._sprints(document.get("sprints"), board_dates["created"])
        migrated["metadata"] = {
            "nextId": self._next_id(metadata.get("nextId"), tasks),
            "version": self.target_version,
        }
        migrated["dates"] = board_dates
        return migrated

    def _fail(self, reason: str) -> NoReturn:
        raise MigrationStepError(f"{self.source_version} -> {self.target_version}", reason)

    def _board_dates(self, metadata: dict[str, Any]) -> dict[str, Any]:
        created = metadata.get("createdAt")
        modified = metadata.get("lastModified")
        if created is None and modified is None:
            self._fail("metadata has neither createdAt nor lastModified")
        created = created if created is not None else modified
        modified = modified if modified is not None else created
        return {"created": created, "updated": modified, "saved": modified}

    def _columns(self, raw: Any) -> list[dict[str, Any]]:
        if raw is None:
            return []
        if not isinstance(raw, list):
            self._fail("configuration.columns is not a list")

        columns = []
        for entry in raw:
            if isinstance(entry, dict) and entry.get("name") is not None:
                columns.append({"name": str(entry["name"])})
            elif isinstance(entry, (str, int, float)) and not isinstance(entry, bool):
                columns.append({"name": str(entry)})
            else:
                self._fail(f"unrecognized column entry {entry!r}")
        return columns

    def _labels(self, raw: Any) -> list[dict[str, Any]]:
        if raw is None:
            return []
        if not isinstance(raw, list):
            self._fail("labels is not a list")

        labels = []
        for entry in raw:
            if isinstance(entry, str):
                labels.append({"name": entry})
            elif isinstance(entry, dict) and entry.get("name") is not None:
                label: dict[str, Any] = {"name": str(entry["name"])}
                if entry.get("color") is not None:
                    label["color"] = entry["color"]
                labels.append(label)
            else:
                self._fail(f"unrecognized label entry {entry!r}")
        return labels

    def _sprints(self, raw: Any, board_created: Any) -> list[dict[str, Any]]:
        if raw is None:
            return []
        if isinstance(raw, dict):
            entries = [(key, value or {}) for key, value in raw.items()]
        elif isinstance(raw, list):
            entries = [(None, value) for value in raw]
        else:
            self._fail("sprints is neither a mapping nor a list")

        sprints = []
        for key, entry in entries:
            if not isinstance(entry, dict):
                self._fail(f"sprint {key!r} is not a mapping")
            name = entry.get("name", key)
            if name is None:
                self._fail("sprint without a name")

            sprint: dict[str, Any] = {"name": str(name)}
            for field_name in ("description", "capacity"):
                if entry.get(field_name) is not None:
                    sprint[field_name] = entry[field_name]

            legacy_dates = entry.get("dates") if isinstance(entry.get("dates"), dict) else {}
            dates: dict[str, Any] = {
                "created": legacy_dates.get("created", entry.get("createdAt", board_created)),
            }
            starts = legacy_dates.get("starts", entry.get("startDate"))
            ends = legacy_dates.get("ends", entry.get("endDate"))
            if starts is not None:
                dates["starts"] = starts
            if ends is not None:
                dates["ends"] = ends
            sprint["dates"] = dates
            sprints.append(sprint)
        return sprints

    def _tasks(self, raw: Any, board_created: Any) -> dict[str, dict[str, Any]]:
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            self._fail("tasks is not a mapping")

        tasks: dict[str, dict[str, Any]] = {}
        for key, entry in raw.items():
            if not isinstance(entry, dict):
                self._fail(f"task {key!r} is not a mapping")
            try:
                task_id = int(entry.get("id", key))
            except (TypeError, ValueError):
                self._fail(f"task {key!r} has no numeric id")
            if entry.get("title") is None:
                self._fail(f"task {task_id} has no title")

            task: dict[str, Any] = {"id": task_id, "title": str(entry["title"])}
            task["column"] = entry.get("column") or ""
            for field_name in _TASK_FIELDS:
                if entry.get(field_name) is not None:
                    task[field_name] = copy.deepcopy(entry[field_name])
            if entry.get("labels") is not None:
                task["labels"] = self._task_labels(task_id, entry["labels"])

            legacy_dates = entry.get("dates") if isinstance(entry.get("dates"), dict) else {}
            created = legacy_dates.get("created", entry.get("createdAt", board_created))
            dates: dict[str, Any] = {
                "created": created,
                "updated": legacy_dates.get("updated", entry.get("updatedAt", created)),
            }
            moved = legacy_dates.get("moved", entry.get("movedAt"))
            if moved is not None:
                dates["moved"] = moved
            task["dates"] = dates
            if str(task_id) in tasks:
                self._fail(f"duplicate task id {task_id}")
            tasks[str(task_id)] = task
        return tasks

    def _next_id(self, raw: Any, tasks: dict[str, dict[str, Any]]) -> int:
        if raw is not None:
            try:
                next_id = int(raw)
            except (TypeError, ValueError):
                self._fail(f"metadata.nextId {raw!r} is not a number")
        else:
            next_id = 0
        # Never hand out an id that a migrated task already holds
        return max(next_id, max((task["id"] for task in tasks.values()), default=0) + 1)

    def _task_labels(self, task_id: int, raw: Any) -> list[str]:
        if isinstance(raw, str):
            return [raw]
        if not isinstance(raw, list):
            self._fail(f"task {task_id} labels is not a list")

        labels = []
        for entry in raw:
            if isinstance(entry, bool) or not isinstance(entry, (str, int, float)):
                self._fail(f"task {task_id} has unrecognized label {entry!r}")
            labels.append(str(entry))
        return labels
