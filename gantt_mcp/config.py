"""Runtime configuration for Gantt MCP.

Values come from an optional YAML file and are overridden by ``GANTT_MCP_*``
environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

USER_CONFIG_PATH = Path.home() / ".gantt_mcp.yaml"
DEFAULT_CACHE_PATH = Path.home() / ".gantt_mcp" / "geo_gantt_data_v2.json"
ENV_PREFIX = "GANTT_MCP_"


class GanttConfig(BaseModel):
    """Storage and logging settings for the server."""

    remote_url: str = Field(
        default="http://localhost:3001/api/tasks",
        description="Document store endpoint (GET loads, POST replaces); empty disables the remote tier",
    )
    cache_path: Path = Field(default=DEFAULT_CACHE_PATH, description="Local cache file")
    timeout: float = Field(default=10.0, description="HTTP timeout in seconds", gt=0)
    log_level: str = Field(default="WARNING")
    export_filename: str = Field(default="geo_project_plan.json")

    @property
    def remote_enabled(self) -> bool:
        return bool(self.remote_url.strip())


def _config_path() -> Path:
    override = os.environ.get(f"{ENV_PREFIX}CONFIG")
    return Path(override).expanduser() if override else USER_CONFIG_PATH


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def load_config(path: Path | None = None) -> GanttConfig:
    """Build the effective configuration."""
    data = _load_yaml(path or _config_path())
    for name in GanttConfig.model_fields:
        value = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
        if value is not None:
            data[name] = value
    if "cache_path" in data:
        data["cache_path"] = Path(data["cache_path"]).expanduser()
    return GanttConfig.model_validate(data)
