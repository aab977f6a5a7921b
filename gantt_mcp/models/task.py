"""Core schedule models for Gantt MCP."""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_START_DATE = date(2025, 12, 8)
DEFAULT_DURATION_WEEKS = 12
DEFAULT_COLOR = "#FFCC80"
# Upper bound for week offsets, durations and project length (ten years).
MAX_WEEKS = 520


class TaskModel(BaseModel):
    """A single bar on the chart.

    Serialized with the camelCase keys used by the persisted document
    (``parentId``); unknown keys survive a load/save round trip.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True, allow_inf_nan=False)

    id: int
    title: str = ""
    start: float = Field(default=0.0, ge=0, le=MAX_WEEKS)
    duration: float = Field(default=1.0, gt=0, le=MAX_WEEKS)
    color: str = DEFAULT_COLOR
    parent_id: int | None = Field(default=None, alias="parentId")
    collapsed: bool = False

    @property
    def end(self) -> float:
        return self.start + self.duration

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)


class ProjectSettings(BaseModel):
    """Project-level scalars, independent of individual tasks."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    start_date: date = Field(default=DEFAULT_START_DATE, alias="projectStartDate")
    duration_weeks: int = Field(default=DEFAULT_DURATION_WEEKS, alias="projectDurationWeeks", gt=0, le=MAX_WEEKS)


class GanttSnapshot(BaseModel):
    """The full current value of the task store: ordered tasks plus settings."""

    model_config = ConfigDict(frozen=True)

    tasks: tuple[TaskModel, ...] = ()
    settings: ProjectSettings = Field(default_factory=ProjectSettings)

    def get(self, task_id: int) -> TaskModel | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def to_document(self) -> dict:
        """Rich document form: ``{tasks, projectStartDate, projectDurationWeeks}``."""
        return {
            "tasks": [t.to_document() for t in self.tasks],
            "projectStartDate": self.settings.start_date.isoformat(),
            "projectDurationWeeks": self.settings.duration_weeks,
        }


def normalize_parent_id(value: Any) -> int | None:
    """
    Coerce a parent selection to a task id.

    ``None``, an empty or blank string, and "none"/"null" select the root
    level. Anything else must be numeric. Existence is not checked.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if value == "" or value.lower() in ("none", "null"):
            return None
    if isinstance(value, bool):
        raise ValueError(f"Invalid parent id: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid parent id: {value!r}") from None
    if not number.is_integer():
        raise ValueError(f"Invalid parent id: {value!r}")
    return int(number)


def _default_tasks() -> tuple[TaskModel, ...]:
    titles = [
        ("Study the system, operations and business model", "#FFE0B2"),
        ("Build a demo and confirm scope", "#FFF3E0"),
        ("Training and seed customer validation", "#FFCC80"),
        ("Product development and launch", "#FFB74D"),
        ("Review and replicate", "#FF9800"),
        ("Build the core team", "#FFA726"),
    ]
    return tuple(
        TaskModel(id=i + 1, title=title, start=i * 2, duration=2, color=color)
        for i, (title, color) in enumerate(titles)
    )


def default_snapshot() -> GanttSnapshot:
    """Built-in plan used when neither the cache nor the remote store has data."""
    return GanttSnapshot(tasks=_default_tasks(), settings=ProjectSettings())


class DocumentPatch(BaseModel):
    """
    Normalized content of a persisted document.

    Each field is ``None`` when the document did not carry it; a bare task
    array yields only ``tasks``.
    """

    model_config = ConfigDict(frozen=True)

    tasks: tuple[TaskModel, ...] | None = None
    start_date: date | None = None
    duration_weeks: int | None = None
    legacy: bool = False

    @property
    def is_empty(self) -> bool:
        return self.tasks is None and self.start_date is None and self.duration_weeks is None
