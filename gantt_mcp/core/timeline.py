"""Timeline grid calculations: week span, bar placement and date mapping."""

import logging
import math
from collections.abc import Iterable
from datetime import date, timedelta

from gantt_mcp.core.flatten import flatten_visible
from gantt_mcp.models.task import GanttSnapshot, ProjectSettings, TaskModel
from gantt_mcp.models.views import BarPlacement, TimelineRow, TimelineView, WeekHeader

logger = logging.getLogger("gantt_mcp.timeline")

MIN_WEEKS = 4
END_BUFFER_WEEKS = 0.5
DAYS_PER_WEEK = 7


def total_weeks(tasks: Iterable[TaskModel]) -> int:
    """Number of week columns needed to show every bar plus a half-week margin."""
    ends = [t.start + t.duration for t in tasks]
    ends = [e for e in ends if math.isfinite(e)]
    if not ends:
        return MIN_WEEKS
    return max(MIN_WEEKS, math.ceil(max(ends) + END_BUFFER_WEEKS))


def bar_placement(start: float, duration: float, weeks: int) -> BarPlacement:
    """Position and width of a bar as fractions of a track spanning ``weeks``.

    Not clamped: a bar may extend past 1.0 until the week count is recomputed.
    """
    return BarPlacement(left=start / weeks, width=duration / weeks)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def date_for_offset(start_date: date, weeks: float) -> date:
    """Calendar date ``weeks`` after ``start_date``, rounded to the nearest day."""
    return start_date + timedelta(days=_round_half_up(weeks * DAYS_PER_WEEK))


def project_end_date(settings: ProjectSettings) -> date | None:
    if settings.duration_weeks <= 0:
        return None
    try:
        return start_plus_weeks(settings.start_date, settings.duration_weeks)
    except OverflowError as e:
        logger.warning("Project end is out of range: %s", e)
        return None


def start_plus_weeks(start_date: date, weeks: int) -> date:
    return start_date + timedelta(weeks=weeks)


def week_headers(start_date: date, weeks: int) -> list[WeekHeader]:
    """One header per week column; columns past the last representable date are dropped."""
    headers = []
    for i in range(weeks):
        try:
            week_start = start_plus_weeks(start_date, i)
        except OverflowError as e:
            logger.warning("Week %d is out of the calendar range: %s", i + 1, e)
            break
        headers.append(WeekHeader(index=i, label=f"Week {i + 1}", week_start=week_start))
    return headers


def task_date_range(task: TaskModel, start_date: date) -> tuple[date | None, date | None]:
    """
    First and last calendar date covered by a task's bar.

    Either end is None when it falls outside the calendar range.
    """
    dates = []
    for offset in (task.start, task.start + task.duration):
        try:
            dates.append(date_for_offset(start_date, offset))
        except (OverflowError, ValueError) as e:
            logger.warning("Task %s has an undatable offset %s: %s", task.id, offset, e)
            dates.append(None)
    return dates[0], dates[1]


def build_timeline(snapshot: GanttSnapshot, expand_all: bool = False) -> TimelineView:
    """
    Derive the full chart layout for a snapshot.

    The week count is taken over every task, hidden ones included, so
    collapsing a parent never shrinks the grid.
    """
    weeks = total_weeks(snapshot.tasks)
    start_date = snapshot.settings.start_date

    rows = []
    for row in flatten_visible(snapshot.tasks, expand_all=expand_all):
        first, last = task_date_range(row.task, start_date)
        rows.append(
            TimelineRow(
                row=row,
                bar=bar_placement(row.task.start, row.task.duration, weeks),
                start_date=first,
                end_date=last,
            )
        )

    return TimelineView(
        total_weeks=weeks,
        project_start=start_date,
        project_end=project_end_date(snapshot.settings),
        headers=week_headers(start_date, weeks),
        rows=rows,
    )
