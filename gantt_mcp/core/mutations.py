"""
Mutation engine: every operation takes a snapshot and returns a new one.

Nothing here mutates its input or performs I/O; committing the result and
propagating it to storage is the caller's job (see gantt_mcp.state).
"""

from datetime import date
from typing import Any

from gantt_mcp.core.tree import TaskTree
from gantt_mcp.models.task import DEFAULT_COLOR, DocumentPatch, GanttSnapshot, TaskModel, normalize_parent_id

EDITABLE_FIELDS = ("title", "start", "duration", "color", "parent_id", "collapsed")


def next_task_id(tasks: tuple[TaskModel, ...]) -> int:
    return max((t.id for t in tasks), default=0) + 1


def create_task(
    snapshot: GanttSnapshot,
    title: str = "New Task",
    start: float = 0,
    duration: float = 1,
    color: str = DEFAULT_COLOR,
    parent_id: Any = None,
) -> tuple[GanttSnapshot, TaskModel]:
    """Append a new task with the next free id and ``collapsed=False``."""
    task = TaskModel(
        id=next_task_id(snapshot.tasks),
        title=title,
        start=start,
        duration=duration,
        color=color,
        parent_id=normalize_parent_id(parent_id),
        collapsed=False,
    )
    return snapshot.model_copy(update={"tasks": snapshot.tasks + (task,)}), task


def update_task(snapshot: GanttSnapshot, task_id: int, changes: dict[str, Any]) -> GanttSnapshot:
    """
    Merge ``changes`` into the task with ``task_id``.

    Only editable fields are applied; the id never changes. An unknown id
    leaves the task list as it was.
    """
    merged = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
    if "parent_id" in merged:
        merged["parent_id"] = normalize_parent_id(merged["parent_id"])

    tasks = []
    for task in snapshot.tasks:
        if task.id == task_id:
            task = TaskModel.model_validate({**task.model_dump(), **merged})
        tasks.append(task)
    return snapshot.model_copy(update={"tasks": tuple(tasks)})


def delete_task(snapshot: GanttSnapshot, task_id: int) -> tuple[GanttSnapshot, set[int]]:
    """Remove a task together with every descendant.

    Returns the new snapshot and the set of removed ids (empty when the id is
    unknown).
    """
    tree = TaskTree(snapshot.tasks)
    if tree.get(task_id) is None:
        return snapshot, set()

    doomed = tree.descendants(task_id) | {task_id}
    remaining = tuple(t for t in snapshot.tasks if t.id not in doomed)
    return snapshot.model_copy(update={"tasks": remaining}), doomed


def toggle_collapse(snapshot: GanttSnapshot, task_id: int) -> GanttSnapshot:
    """Flip ``collapsed`` on exactly one task; descendants keep their own flags."""
    tasks = tuple(
        t.model_copy(update={"collapsed": not t.collapsed}) if t.id == task_id else t for t in snapshot.tasks
    )
    return snapshot.model_copy(update={"tasks": tasks})


def update_settings(
    snapshot: GanttSnapshot,
    start_date: date | None = None,
    duration_weeks: int | None = None,
) -> GanttSnapshot:
    settings = snapshot.settings
    if start_date is not None:
        settings = settings.model_copy(update={"start_date": start_date})
    if duration_weeks is not None:
        settings = settings.model_copy(update={"duration_weeks": duration_weeks})
    return snapshot.model_copy(update={"settings": settings})


def replace_snapshot(snapshot: GanttSnapshot, patch: DocumentPatch) -> GanttSnapshot:
    """Full-state replace from a loaded or imported document.

    Parts the document does not carry keep their current values.
    """
    update: dict[str, Any] = {}
    if patch.tasks is not None:
        update["tasks"] = tuple(patch.tasks)
    if patch.start_date is not None or patch.duration_weeks is not None:
        update["settings"] = update_settings(snapshot, patch.start_date, patch.duration_weeks).settings
    return snapshot.model_copy(update=update)
