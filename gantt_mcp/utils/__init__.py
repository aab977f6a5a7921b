"""Utility functions for Gantt MCP."""

from gantt_mcp.utils.formatters import (
    _format_chart_ascii,
    _format_rows_concise,
    _format_task_markdown,
    _format_timeline_markdown,
)
from gantt_mcp.utils.parsers import DocumentError, _parse_document, _parse_task, _parse_tasks
from gantt_mcp.utils.storage import LocalCache, RemoteStore, SnapshotPersister, bootstrap

__all__ = [
    "DocumentError",
    "_parse_document",
    "_parse_task",
    "_parse_tasks",
    "_format_rows_concise",
    "_format_timeline_markdown",
    "_format_chart_ascii",
    "_format_task_markdown",
    "LocalCache",
    "RemoteStore",
    "SnapshotPersister",
    "bootstrap",
]
