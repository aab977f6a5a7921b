"""FastMCP server initialization for Gantt MCP."""

import logging
import sys

from mcp.server.fastmcp import FastMCP

# Initialize the MCP server
mcp = FastMCP("gantt_mcp")


def _configure_logging(level: str) -> None:
    # stdout carries the stdio protocol
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run() -> None:
    """Load the plan, wire persistence and run the MCP server."""
    from gantt_mcp.config import load_config
    from gantt_mcp.state import state
    from gantt_mcp.utils.storage import bootstrap

    config = load_config()
    _configure_logging(config.log_level)
    persister = bootstrap(state, config)
    try:
        mcp.run()
    finally:
        persister.close()

