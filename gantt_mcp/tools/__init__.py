"""MCP tool definitions for Gantt MCP."""

# Import all tools to register them with the MCP server
from gantt_mcp.tools.core import (
    gantt_add,
    gantt_delete,
    gantt_get,
    gantt_list,
    gantt_toggle,
    gantt_update,
)
from gantt_mcp.tools.documents import gantt_export, gantt_import, gantt_reload
from gantt_mcp.tools.timeline import gantt_diagnose, gantt_project, gantt_timeline

__all__ = [
    # Task tools
    "gantt_list",
    "gantt_get",
    "gantt_add",
    "gantt_update",
    "gantt_delete",
    "gantt_toggle",
    # Timeline tools
    "gantt_timeline",
    "gantt_project",
    "gantt_diagnose",
    # Document tools
    "gantt_export",
    "gantt_import",
    "gantt_reload",
]
