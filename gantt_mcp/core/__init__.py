"""Scheduling and layout engine: tree resolution, flattening, timeline and mutations."""

from gantt_mcp.core.flatten import flatten_visible, hidden_task_ids
from gantt_mcp.core.mutations import (
    create_task,
    delete_task,
    next_task_id,
    normalize_parent_id,
    replace_snapshot,
    toggle_collapse,
    update_settings,
    update_task,
)
from gantt_mcp.core.timeline import (
    MIN_WEEKS,
    bar_placement,
    build_timeline,
    date_for_offset,
    project_end_date,
    task_date_range,
    total_weeks,
    week_headers,
)
from gantt_mcp.core.tree import CYCLE_DEPTH, TaskTree

__all__ = [
    # Tree resolver
    "TaskTree",
    "CYCLE_DEPTH",
    # Visibility flattener
    "flatten_visible",
    "hidden_task_ids",
    # Timeline calculator
    "MIN_WEEKS",
    "total_weeks",
    "bar_placement",
    "date_for_offset",
    "project_end_date",
    "week_headers",
    "task_date_range",
    "build_timeline",
    # Mutation engine
    "next_task_id",
    "normalize_parent_id",
    "create_task",
    "update_task",
    "delete_task",
    "toggle_collapse",
    "update_settings",
    "replace_snapshot",
]
