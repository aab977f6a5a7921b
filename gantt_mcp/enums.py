"""Enums for Gantt MCP."""

from enum import Enum


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    CONCISE = "concise"  # One line per row, for chaining
    MARKDOWN = "markdown"  # Human-readable (default)
    JSON = "json"  # Machine-readable with all fields


class SnapshotSource(str, Enum):
    """Where a committed snapshot came from."""

    EDIT = "edit"
    LOCAL = "local"
    REMOTE = "remote"
    IMPORT = "import"
