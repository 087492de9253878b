"""Canonical board models for the current ``.knbn`` schema.

Defines the typed board representation: Board with its Column, Label,
Sprint and Task records. Field names follow Python conventions while
``to_dict``/``from_dict`` translate to and from the camelCase keys used
on disk.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any


def format_timestamp(moment: datetime) -> str:
    """Render *moment* as UTC ISO-8601 with millisecond precision and ``Z``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def _text(value: Any) -> str:
    # YAML resolves unquoted timestamps to datetime objects
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _optional_text(value: Any) -> str | None:
    return None if value is None else _text(value)


@dataclass(frozen=True)
class Column:
    """A board column."""

    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Column:
        return cls(name=_text(data["name"]))


@dataclass(frozen=True)
class Label:
    """A named, optionally colored, task label."""

    name: str
    color: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"name": self.name}
        if self.color is not None:
            d["color"] = self.color
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Label:
        return cls(name=_text(data["name"]), color=_optional_text(data.get("color")))


@dataclass(frozen=True)
class SprintDates:
    created: str
    starts: str | None = None
    ends: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"created": self.created}
        if self.starts is not None:
            d["starts"] = self.starts
        if self.ends is not None:
            d["ends"] = self.ends
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SprintDates:
        return cls(
            created=_text(data["created"]),
            starts=_optional_text(data.get("starts")),
            ends=_optional_text(data.get("ends")),
        )


@dataclass(frozen=True)
class Sprint:
    """A time-boxed sprint tasks can be assigned to."""

    name: str
    dates: SprintDates
    description: str | None = None
    capacity: int | float | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"name": self.name}
        if self.description is not None:
            d["description"] = self.description
        if self.capacity is not None:
            d["capacity"] = self.capacity
        d["dates"] = self.dates.to_dict()
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Sprint:
        return cls(
            name=_text(data["name"]),
            dates=SprintDates.from_dict(data["dates"]),
            description=_optional_text(data.get("description")),
            capacity=data.get("capacity"),
        )


@dataclass(frozen=True)
class TaskDates:
    created: str
    updated: str
    moved: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"created": self.created, "updated": self.updated}
        if self.moved is not None:
            d["moved"] = self.moved
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaskDates:
        return cls(
            created=_text(data["created"]),
            updated=_text(data["updated"]),
            moved=_optional_text(data.get("moved")),
        )


@dataclass(frozen=True)
class Task:
    """A single task on the board.

    ``column`` names the column the task sits in; an empty string means the
    task is in the backlog.
    """

    id: int
    title: str
    column: str
    dates: TaskDates
    description: str | None = None
    labels: list[str] | None = None
    priority: int | float | None = None
    story_points: int | float | None = None
    sprint: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"id": self.id, "title": self.title}
        if self.description is not None:
            d["description"] = self.description
        d["column"] = self.column
        if self.labels is not None:
            d["labels"] = list(self.labels)
        if self.priority is not None:
            d["priority"] = self.priority
        if self.story_points is not None:
            d["storyPoints"] = self.story_points
        if self.sprint is not None:
            d["sprint"] = self.sprint
        d["dates"] = self.dates.to_dict()
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        labels = data.get("labels")
        if labels is not None and not isinstance(labels, list):
            raise TypeError(f"task labels must be a list, got {type(labels).__name__}")
        return cls(
            id=int(data["id"]),
            title=_text(data["title"]),
            column=_text(data.get("column") or ""),
            dates=TaskDates.from_dict(data["dates"]),
            description=_optional_text(data.get("description")),
            labels=[_text(label) for label in labels] if labels is not None else None,
            priority=data.get("priority"),
            story_points=data.get("storyPoints"),
            sprint=_optional_text(data.get("sprint")),
        )


@dataclass(frozen=True)
class BoardMetadata:
    next_id: int
    version: str

    def to_dict(self) -> dict[str, Any]:
        return {"nextId": self.next_id, "version": self.version}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BoardMetadata:
        return cls(next_id=int(data["nextId"]), version=_text(data["version"]))


@dataclass(frozen=True)
class BoardDates:
    created: str
    updated: str
    saved: str

    def to_dict(self) -> dict[str, Any]:
        return {"created": self.created, "updated": self.updated, "saved": self.saved}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BoardDates:
        return cls(
            created=_text(data["created"]),
            updated=_text(data["updated"]),
            saved=_text(data["saved"]),
        )


@dataclass(frozen=True)
class Board:
    """A kanban board at the current schema version."""

    name: str
    columns: list[Column]
    tasks: dict[str, Task]
    metadata: BoardMetadata
    dates: BoardDates
    description: str | None = None
    labels: list[Label] | None = None
    sprints: list[Sprint] | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"name": self.name}
        if self.description is not None:
            d["description"] = self.description
        d["columns"] = [c.to_dict() for c in self.columns]
        d["tasks"] = {key: task.to_dict() for key, task in self.tasks.items()}
        if self.labels is not None:
            d["labels"] = [label.to_dict() for label in self.labels]
        if self.sprints is not None:
            d["sprints"] = [s.to_dict() for s in self.sprints]
        d["metadata"] = self.metadata.to_dict()
        d["dates"] = self.dates.to_dict()
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Board:
        labels = data.get("labels")
        sprints = data.get("sprints")
        return cls(
            name=_text(data["name"]),
            description=_optional_text(data.get("description")),
            columns=[Column.from_dict(c) for c in data.get("columns") or []],
            tasks={
                str(key): Task.from_dict(value)
                for key, value in (data.get("tasks") or {}).items()
            },
            labels=[Label.from_dict(label) for label in labels] if labels is not None else None,
            sprints=[Sprint.from_dict(s) for s in sprints] if sprints is not None else None,
            metadata=BoardMetadata.from_dict(data["metadata"]),
            dates=BoardDates.from_dict(data["dates"]),
        )

    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]
