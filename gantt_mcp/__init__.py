"""
MCP Server for hierarchical Gantt project plans.

This server keeps a project plan as a tree of week-based tasks, renders it as
a numbered, collapsible timeline, and persists every change to a local cache
and a remote document store.
"""

# Re-export enums
from gantt_mcp.enums import ResponseFormat, SnapshotSource

# Re-export models
from gantt_mcp.models import (
    AddTaskInput,
    BarPlacement,
    DeleteTaskInput,
    DiagnoseInput,
    DocumentPatch,
    ExportInput,
    GanttSnapshot,
    GetTaskInput,
    ImportInput,
    ListRowsInput,
    ProjectSettings,
    ProjectSettingsInput,
    ReloadInput,
    TaskModel,
    TimelineInput,
    TimelineRow,
    TimelineView,
    ToggleCollapseInput,
    TreeIssue,
    UpdateTaskInput,
    VisibleRow,
    WeekHeader,
    default_snapshot,
)

# Re-export MCP server instance and state
from gantt_mcp.server import mcp
from gantt_mcp.state import GanttState, state

# Re-export tools
from gantt_mcp.tools import (
    gantt_add,
    gantt_delete,
    gantt_diagnose,
    gantt_export,
    gantt_get,
    gantt_import,
    gantt_list,
    gantt_project,
    gantt_reload,
    gantt_timeline,
    gantt_toggle,
    gantt_update,
)

# Re-export utilities (including private functions used by tests)
from gantt_mcp.utils import (
    DocumentError,
    LocalCache,
    RemoteStore,
    SnapshotPersister,
    _format_chart_ascii,
    _format_rows_concise,
    _format_task_markdown,
    _format_timeline_markdown,
    _parse_document,
    _parse_task,
    _parse_tasks,
    bootstrap,
)

__all__ = [
    # Enums
    "ResponseFormat",
    "SnapshotSource",
    # Store models
    "TaskModel",
    "ProjectSettings",
    "GanttSnapshot",
    "DocumentPatch",
    "default_snapshot",
    # View models
    "VisibleRow",
    "BarPlacement",
    "WeekHeader",
    "TimelineRow",
    "TimelineView",
    "TreeIssue",
    # Input models
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
    # State
    "GanttState",
    "state",
    # Persistence
    "DocumentError",
    "LocalCache",
    "RemoteStore",
    "SnapshotPersister",
    "bootstrap",
    # Utility functions
    "_parse_document",
    "_parse_task",
    "_parse_tasks",
    "_format_rows_concise",
    "_format_timeline_markdown",
    "_format_chart_ascii",
    "_format_task_markdown",
    # Tools
    "gantt_list",
    "gantt_get",
    "gantt_add",
    "gantt_update",
    "gantt_delete",
    "gantt_toggle",
    "gantt_timeline",
    "gantt_project",
    "gantt_diagnose",
    "gantt_export",
    "gantt_import",
    "gantt_reload",
    # MCP server instance
    "mcp",
]
