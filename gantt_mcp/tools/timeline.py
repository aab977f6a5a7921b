"""Timeline and project-level MCP tools."""

import json

from mcp.types import ToolAnnotations

from gantt_mcp.core.mutations import update_settings
from gantt_mcp.core.timeline import build_timeline, project_end_date, total_weeks
from gantt_mcp.core.tree import TaskTree
from gantt_mcp.enums import ResponseFormat
from gantt_mcp.models.inputs import DiagnoseInput, ProjectSettingsInput, TimelineInput
from gantt_mcp.server import mcp
from gantt_mcp.state import state
from gantt_mcp.utils.formatters import (
    _format_chart_ascii,
    _format_date,
    _format_issues_markdown,
    _format_timeline_markdown,
)


@mcp.tool(
    name="gantt_timeline",
    annotations=ToolAnnotations(
        title="Show Timeline",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def gantt_timeline(params: TimelineInput) -> str:
    """
    Show the week grid, bar placement and calendar dates of the visible rows.

    The grid always spans at least 4 weeks and ends half a week or more after
    the latest bar. Bar positions are given as fractions of that grid; week
    headers carry the calendar date each week starts on.

    Args:
        params: TimelineInput containing chart, cells_per_week, expand_all and response_format

    Returns:
        Markdown table (plus text chart) or JSON timeline
    """
    view = build_timeline(state.snapshot, expand_all=params.expand_all)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(view.model_dump(mode="json"), indent=2, ensure_ascii=False)

    if params.response_format == ResponseFormat.CONCISE:
        end = _format_date(view.project_end)
        lines = [f"{view.total_weeks} week(s) | {view.project_start.isoformat()} → {end}"]
        for item in view.rows:
            lines.append(
                f"{item.row.display_number} #{item.row.task.id}: "
                f"{item.bar.left:.0%}+{item.bar.width:.0%} "
                f"({_format_date(item.start_date)} → {_format_date(item.end_date)})"
            )
        return "\n".join(lines)

    output = _format_timeline_markdown(view, "Timeline")
    if params.chart and view.rows:
        output += "\n\n```\n" + _format_chart_ascii(view, params.cells_per_week) + "\n```"
    return output


@mcp.tool(
    name="gantt_project",
    annotations=ToolAnnotations(
        title="Project Settings",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def gantt_project(params: ProjectSettingsInput) -> str:
    """
    View or change the project start date and planned duration.

    Call without start_date/duration_weeks to just read the settings. The
    planned duration only sets the project end date; it does not change the
    grid, which follows the tasks.

    Args:
        params: ProjectSettingsInput containing optional start_date and duration_weeks

    Returns:
        Current (possibly updated) settings

    Examples:
        - Read: params with no fields
        - Move the start: params with start_date="2026-01-05"
        - Change the duration: params with duration_weeks=16
    """
    snapshot = state.snapshot
    changed = params.start_date is not None or params.duration_weeks is not None
    if changed:
        snapshot = state.commit(update_settings(snapshot, params.start_date, params.duration_weeks))

    settings = snapshot.settings
    end = project_end_date(settings)
    weeks = total_weeks(snapshot.tasks)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {
                "start_date": settings.start_date.isoformat(),
                "duration_weeks": settings.duration_weeks,
                "end_date": end.isoformat() if end else None,
                "total_weeks": weeks,
            },
            indent=2,
        )

    lines = ["Project settings updated." if changed else "# Project"]
    lines.append(f"**Start**: {settings.start_date.isoformat()}")
    lines.append(f"**Duration**: {settings.duration_weeks} week(s)")
    lines.append(f"**End**: {end.isoformat() if end else '-'}")
    lines.append(f"**Grid**: {weeks} week(s)")
    return "\n".join(lines)


@mcp.tool(
    name="gantt_diagnose",
    annotations=ToolAnnotations(
        title="Diagnose Task Tree",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def gantt_diagnose(params: DiagnoseInput) -> str:
    """
    Find tasks that cannot be placed in the tree.

    Orphans point at a parent ID that does not exist; cycles are parent chains
    that loop back on themselves. Neither kind is shown by gantt_list. Fix
    them with gantt_update (e.g. parent_id="").

    Args:
        params: DiagnoseInput containing response_format

    Returns:
        List of structural problems
    """
    issues = TaskTree(state.snapshot.tasks).anomalies()

    if params.response_format == ResponseFormat.JSON:
        return json.dumps({"count": len(issues), "issues": [i.model_dump() for i in issues]}, indent=2)

    if params.response_format == ResponseFormat.CONCISE:
        if not issues:
            return "0 problems"
        return "\n".join(f"#{i.task_id}: {i.kind} ({i.detail})" for i in issues)

    return _format_issues_markdown(issues)
