"""Core MCP tool definitions: listing and editing tasks."""

import json

from mcp.types import ToolAnnotations

from gantt_mcp.core.flatten import flatten_visible
from gantt_mcp.core.mutations import create_task, delete_task, toggle_collapse, update_task
from gantt_mcp.core.timeline import build_timeline, task_date_range
from gantt_mcp.core.tree import TaskTree
from gantt_mcp.enums import ResponseFormat
from gantt_mcp.models.inputs import (
    AddTaskInput,
    DeleteTaskInput,
    GetTaskInput,
    ListRowsInput,
    ToggleCollapseInput,
    UpdateTaskInput,
)
from gantt_mcp.server import mcp
from gantt_mcp.state import state
from gantt_mcp.utils.formatters import (
    _format_date,
    _format_rows_concise,
    _format_task_markdown,
    _format_timeline_markdown,
)


def _not_found(task_id: int) -> str:
    return f"Error: Task '{task_id}' not found.\nTip: Use gantt_list with expand_all=true to find valid task IDs."


@mcp.tool(
    name="gantt_list",
    annotations=ToolAnnotations(
        title="List Chart Rows",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def gantt_list(params: ListRowsInput) -> str:
    """
    List the chart rows in display order with their hierarchical numbers.

    USE THIS WHEN:
    - You want to see the plan as it is displayed (roots, children, numbering)
    - You need task IDs before editing
    - Checking which subtrees are collapsed

    DO NOT USE WHEN:
    - You want week headers, dates and a drawn chart → use gantt_timeline
    - You have a specific task ID → use gantt_get

    Collapsed tasks are listed but their children are not, unless expand_all
    is set. Numbers like "2.1" are positional: they change when siblings are
    added, removed or reparented, unlike task IDs.

    Args:
        params: ListRowsInput containing expand_all and response_format

    Returns:
        Formatted rows (markdown, concise, or JSON)
    """
    snapshot = state.snapshot

    if params.response_format == ResponseFormat.JSON:
        rows = flatten_visible(snapshot.tasks, expand_all=params.expand_all)
        return json.dumps(
            {
                "total": len(snapshot.tasks),
                "count": len(rows),
                "rows": [r.model_dump(mode="json") for r in rows],
            },
            indent=2,
            ensure_ascii=False,
        )

    if params.response_format == ResponseFormat.CONCISE:
        rows = flatten_visible(snapshot.tasks, expand_all=params.expand_all)
        return _format_rows_concise(rows, f"{len(snapshot.tasks)} task(s)")

    view = build_timeline(snapshot, expand_all=params.expand_all)
    return _format_timeline_markdown(view, f"Tasks ({len(snapshot.tasks)})")


@mcp.tool(
    name="gantt_get",
    annotations=ToolAnnotations(
        title="Get Task Details",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def gantt_get(params: GetTaskInput) -> str:
    """
    Retrieve one task with its number, depth, children and calendar dates.

    Args:
        params: GetTaskInput containing task_id and response_format

    Returns:
        Detailed task information (markdown, concise, or JSON)

    Examples:
        - Get task #5: params with task_id=5
        - Get task as JSON: params with task_id=5, response_format="json"
    """
    snapshot = state.snapshot
    tree = TaskTree(snapshot.tasks)
    task = tree.get(params.task_id)
    if task is None:
        return _not_found(params.task_id)

    row = next((r for r in flatten_visible(snapshot.tasks) if r.task.id == task.id), None)
    depth = tree.depth(task.id)
    children = tree.children(task.id)
    first, last = task_date_range(task, snapshot.settings.start_date)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {
                "task": task.to_document(),
                "display_number": row.display_number if row else None,
                "depth": depth,
                "children": [c.id for c in children],
                "start_date": first.isoformat() if first else None,
                "end_date": last.isoformat() if last else None,
            },
            indent=2,
            ensure_ascii=False,
        )

    if params.response_format == ResponseFormat.CONCISE:
        number = row.display_number if row else "-"
        return f"{number} #{task.id}: {task.title} ({_format_date(first)} → {_format_date(last)})"

    dates = f"\n**Dates**: {_format_date(first)} → {_format_date(last)}"
    return _format_task_markdown(task, row, depth, children) + dates


@mcp.tool(
    name="gantt_add",
    annotations=ToolAnnotations(
        title="Add Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def gantt_add(params: AddTaskInput) -> str:
    """
    Create a new task at the end of the plan.

    The new task gets the next free ID (highest existing ID + 1) and starts
    expanded. Start and duration are in weeks relative to the project start.

    Args:
        params: AddTaskInput containing title, start, duration, color and parent_id

    Returns:
        Confirmation message with the created task ID

    Examples:
        - Top-level task: params with title="Kickoff", start=0, duration=1
        - Subtask: params with title="Draft brief", start=0.5, duration=1, parent_id=1
    """
    snapshot, task = create_task(
        state.snapshot,
        title=params.title,
        start=params.start,
        duration=params.duration,
        color=params.color,
        parent_id=params.parent_id,
    )
    state.commit(snapshot)
    note = ""
    if task.parent_id is not None and snapshot.get(task.parent_id) is None:
        note = f"\nWarning: parent #{task.parent_id} does not exist; the task will not be shown until it does."
    return f"Task created successfully.\nCreated task {task.id}: {task.title}{note}"


@mcp.tool(
    name="gantt_update",
    annotations=ToolAnnotations(
        title="Update Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def gantt_update(params: UpdateTaskInput) -> str:
    """
    Update an existing task's fields.

    Only the supplied fields change. Moving a task under a new parent does
    not change its dates; bars are independent of their parent's bar.

    CLEARING PARENT: Use parent_id="" to move a task to the top level.

    Args:
        params: UpdateTaskInput containing task_id and fields to change

    Returns:
        Confirmation message

    Examples:
        - Rename: params with task_id=5, title="Design review"
        - Shift by a week: params with task_id=5, start=3
        - Reparent: params with task_id=5, parent_id=2
        - Make top-level: params with task_id=5, parent_id=""
    """
    if state.snapshot.get(params.task_id) is None:
        return _not_found(params.task_id)

    changes = params.changes()
    if not changes:
        return f"Error: No changes supplied for task {params.task_id}."

    snapshot = state.commit(update_task(state.snapshot, params.task_id, changes))

    tree = TaskTree(snapshot.tasks)
    issues = [i for i in tree.anomalies() if i.task_id == params.task_id]
    message = f"Task {params.task_id} updated successfully."
    for issue in issues:
        message += f"\nWarning: {issue.kind} - {issue.detail}"
    return message


@mcp.tool(
    name="gantt_delete",
    annotations=ToolAnnotations(
        title="Delete Task",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def gantt_delete(params: DeleteTaskInput) -> str:
    """
    Delete a task and every task beneath it.

    The whole subtree is removed; there is no undo.

    Args:
        params: DeleteTaskInput containing the task_id to delete

    Returns:
        Confirmation message listing the removed IDs
    """
    snapshot, removed = delete_task(state.snapshot, params.task_id)
    if not removed:
        return _not_found(params.task_id)

    state.commit(snapshot)
    ids = ", ".join(str(i) for i in sorted(removed))
    return f"Task {params.task_id} deleted.\nRemoved {len(removed)} task(s): {ids}"


@mcp.tool(
    name="gantt_toggle",
    annotations=ToolAnnotations(
        title="Collapse/Expand Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def gantt_toggle(params: ToggleCollapseInput) -> str:
    """
    Collapse or expand a task's subtree in the displayed chart.

    Only the given task's flag flips; the collapse state of its descendants is
    left as it was and takes effect again once this task is expanded.

    Args:
        params: ToggleCollapseInput containing the task_id

    Returns:
        Confirmation message with the new state
    """
    if state.snapshot.get(params.task_id) is None:
        return _not_found(params.task_id)

    snapshot = state.commit(toggle_collapse(state.snapshot, params.task_id))
    task = snapshot.get(params.task_id)
    return f"Task {params.task_id} {'collapsed' if task.collapsed else 'expanded'}."
