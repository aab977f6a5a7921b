"""Run the Gantt MCP server with ``python -m gantt_mcp``."""

from gantt_mcp.server import run

run()
