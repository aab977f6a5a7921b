"""Pydantic models for Gantt MCP."""

from gantt_mcp.models.inputs import (
    AddTaskInput,
    DeleteTaskInput,
    DiagnoseInput,
    ExportInput,
    GetTaskInput,
    ImportInput,
    ListRowsInput,
    ProjectSettingsInput,
    ReloadInput,
    TimelineInput,
    ToggleCollapseInput,
    UpdateTaskInput,
)
from gantt_mcp.models.task import (
    DocumentPatch,
    GanttSnapshot,
    ProjectSettings,
    TaskModel,
    default_snapshot,
    normalize_parent_id,
)
from gantt_mcp.models.views import (
    BarPlacement,
    TimelineRow,
    TimelineView,
    TreeIssue,
    VisibleRow,
    WeekHeader,
)

__all__ = [
    # Store models
    "TaskModel",
    "ProjectSettings",
    "GanttSnapshot",
    "DocumentPatch",
    "default_snapshot",
    "normalize_parent_id",
    # Derived view models
    "VisibleRow",
    "BarPlacement",
    "WeekHeader",
    "TimelineRow",
    "TimelineView",
    "TreeIssue",
    # Tool input models
    "ListRowsInput",
    "GetTaskInput",
    "AddTaskInput",
    "UpdateTaskInput",
    "DeleteTaskInput",
    "ToggleCollapseInput",
    "TimelineInput",
    "ProjectSettingsInput",
    "DiagnoseInput",
    "ExportInput",
    "ImportInput",
    "ReloadInput",
]
