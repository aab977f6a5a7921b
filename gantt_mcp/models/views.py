"""Derived (never persisted) view models produced by the layout engine."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

from gantt_mcp.models.task import TaskModel


class VisibleRow(BaseModel):
    """A task as it appears in the flattened display sequence."""

    task: TaskModel
    display_number: str
    depth: int
    has_children: bool = False


class BarPlacement(BaseModel):
    """Horizontal placement of a bar as fractions of the timeline track."""

    left: float
    width: float

    @property
    def right(self) -> float:
        return self.left + self.width


class WeekHeader(BaseModel):
    """One column of the week header row."""

    index: int
    label: str
    week_start: date

    @property
    def short_date(self) -> str:
        return self.week_start.strftime("%m/%d")


class TimelineRow(BaseModel):
    """A visible row together with its bar and calendar dates."""

    row: VisibleRow
    bar: BarPlacement
    start_date: date | None = None
    end_date: date | None = None


class TimelineView(BaseModel):
    """Everything needed to draw the chart for one snapshot."""

    total_weeks: int
    project_start: date
    project_end: date | None = None
    headers: list[WeekHeader] = Field(default_factory=list)
    rows: list[TimelineRow] = Field(default_factory=list)


class TreeIssue(BaseModel):
    """A structural anomaly found in the parent links."""

    kind: Literal["orphan", "cycle"]
    task_id: int
    detail: str
