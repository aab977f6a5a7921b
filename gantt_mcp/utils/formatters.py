"""Formatting utilities for chart output."""

import math
from datetime import date

from gantt_mcp.models.task import TaskModel
from gantt_mcp.models.views import TimelineRow, TimelineView, TreeIssue, VisibleRow

INDENT = "  "
COLLAPSED_MARK = "▶"
EXPANDED_MARK = "▼"


def _format_weeks(value: float) -> str:
    """Drop the trailing .0 from whole week counts."""
    return f"{value:g}"


def _format_date(value: date | None) -> str:
    return value.isoformat() if value is not None else "-"


def _toggle_mark(row: VisibleRow) -> str:
    if not row.has_children:
        return " "
    return COLLAPSED_MARK if row.task.collapsed else EXPANDED_MARK


def _format_row_concise(row: VisibleRow) -> str:
    """
    Format a single visible row in concise format.

    Output: "2.1 #5: Design review (wk 2+1.5) ▶"
    """
    task = row.task
    title = task.title[:50] if task.title else "Untitled"
    line = f"{row.display_number} #{task.id}: {title} (wk {_format_weeks(task.start)}+{_format_weeks(task.duration)})"
    if row.has_children and task.collapsed:
        line += f" {COLLAPSED_MARK}"
    return INDENT * row.depth + line


def _format_rows_concise(rows: list[VisibleRow], title: str | None = None) -> str:
    """
    Format visible rows in concise format.

    Output:
    3 row(s) | Plan
    1 #1: Kickoff (wk 0+2)
      1.1 #4: Brief (wk 0+1)
    2 #2: Build (wk 2+4)
    """
    if not rows:
        return "0 rows"

    header = f"{len(rows)} row(s)"
    if title:
        header = f"{len(rows)} row(s) | {title}"
    return "\n".join([header] + [_format_row_concise(r) for r in rows])


def _format_timeline_markdown(view: TimelineView, title: str = "Project Plan") -> str:
    """Format the visible rows with dates and bar placement as a markdown table."""
    lines = [f"# {title}"]

    end = _format_date(view.project_end)
    lines.append(
        f"*Start {view.project_start.isoformat()} | {view.total_weeks} week(s) on the grid | Project end {end}*"
    )
    lines.append("")

    if not view.rows:
        lines.append("No tasks found.")
        return "\n".join(lines)

    lines.append("| # | | Task | Start | End | Bar |")
    lines.append("|---|---|---|---|---|---|")
    for item in view.rows:
        row = item.row
        name = "&nbsp;" * 4 * row.depth + (row.task.title or "Untitled")
        if row.has_children:
            name = f"**{name}**"
        lines.append(
            f"| {row.display_number} | {_toggle_mark(row)} | {name} (#{row.task.id}) "
            f"| {_format_date(item.start_date)} | {_format_date(item.end_date)} "
            f"| {item.bar.left:.0%}-{item.bar.right:.0%} |"
        )
    return "\n".join(lines)


def _format_week_header_line(view: TimelineView, cells_per_week: int) -> str:
    return "".join(h.short_date.ljust(cells_per_week)[:cells_per_week] for h in view.headers)


def _bar_cells(item: TimelineRow, total_cells: int) -> str:
    first = math.floor(item.bar.left * total_cells)
    last = math.ceil(item.bar.right * total_cells)
    first = max(0, min(first, total_cells))
    last = max(first + 1, last)
    return " " * first + "█" * (last - first)


def _format_chart_ascii(view: TimelineView, cells_per_week: int = 6, label_width: int = 32) -> str:
    """
    Draw the chart as text: one label column and ``cells_per_week`` cells per week.

    Bars that run past the last week are drawn past the grid edge rather than
    clipped.
    """
    total_cells = view.total_weeks * cells_per_week
    lines = [" " * label_width + "|" + _format_week_header_line(view, cells_per_week)]
    lines.append("-" * label_width + "+" + "-" * total_cells)

    for item in view.rows:
        row = item.row
        label = f"{INDENT * row.depth}{_toggle_mark(row)} {row.display_number} {row.task.title}"
        if len(label) > label_width:
            label = label[: label_width - 1] + "…"
        lines.append(label.ljust(label_width) + "|" + _bar_cells(item, total_cells))

    return "\n".join(lines)


def _format_task_markdown(task: TaskModel, row: VisibleRow | None, depth: int, children: list[TaskModel]) -> str:
    """Format a single task with its position in the tree."""
    number = row.display_number if row else "hidden"
    lines = [f"### [{task.id}] {task.title or 'Untitled'}"]

    details = [
        f"**Number**: {number}",
        f"**Start**: week {_format_weeks(task.start)}",
        f"**Duration**: {_format_weeks(task.duration)} week(s)",
        f"**Color**: {task.color}",
    ]
    if task.parent_id is not None:
        details.append(f"**Parent**: #{task.parent_id}")
    details.append(f"**Depth**: {depth}")
    if task.collapsed:
        details.append("**Collapsed**")
    lines.append(" | ".join(details))

    if children:
        lines.append("**Children:**")
        for child in children:
            lines.append(f"  - [{child.id}] {child.title}")

    return "\n".join(lines)


def _format_issues_markdown(issues: list[TreeIssue]) -> str:
    if not issues:
        return "# Diagnostics\n\nNo structural problems found."
    lines = ["# Diagnostics", f"*{len(issues)} problem(s)*", ""]
    for issue in issues:
        lines.append(f"- **{issue.kind}** task #{issue.task_id}: {issue.detail}")
    return "\n".join(lines)
