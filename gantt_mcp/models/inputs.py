"""Input models for Gantt MCP tools."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from gantt_mcp.enums import ResponseFormat
from gantt_mcp.models.task import MAX_WEEKS, normalize_parent_id

# ============================================================================
# Task Tool Input Models
# ============================================================================


def _check_parent(v: str | int | None) -> str | int | None:
    # Reject non-numeric selections up front; "" stays meaningful (root).
    if v is not None:
        normalize_parent_id(v)
    return v


class ListRowsInput(BaseModel):
    """Input model for listing the visible rows."""

    model_config = ConfigDict(str_strip_whitespace=True)

    expand_all: bool = Field(default=False, description="Ignore collapse flags and list every task")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class GetTaskInput(BaseModel):
    """Input model for getting a single task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: int = Field(..., description="Task ID to retrieve", ge=1)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )


class AddTaskInput(BaseModel):
    """Input model for adding a new task."""

    model_config = ConfigDict(str_strip_whitespace=True, allow_inf_nan=False)

    title: str = Field(default="New Task", description="Task title", min_length=1, max_length=500)
    start: float = Field(
        default=0, description="Start offset in weeks from the project start (0.5 steps)", ge=0, le=MAX_WEEKS
    )
    duration: float = Field(default=1, description="Length in weeks", gt=0, le=MAX_WEEKS)
    color: str = Field(default="#FFCC80", description="Bar colour (CSS colour string)", min_length=1)
    parent_id: str | int | None = Field(
        default=None,
        description="Parent task ID; omit or use empty string for a top-level task",
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()

    @field_validator("parent_id")
    @classmethod
    def validate_parent_id(cls, v: str | int | None) -> str | int | None:
        return _check_parent(v)


class UpdateTaskInput(BaseModel):
    """Input model for updating a task."""

    model_config = ConfigDict(str_strip_whitespace=True, allow_inf_nan=False)

    task_id: int = Field(..., description="Task ID to update", ge=1)
    title: str | None = Field(default=None, description="New title", min_length=1, max_length=500)
    start: float | None = Field(default=None, description="New start offset in weeks", ge=0, le=MAX_WEEKS)
    duration: float | None = Field(default=None, description="New length in weeks", gt=0, le=MAX_WEEKS)
    color: str | None = Field(default=None, description="New bar colour", min_length=1)
    parent_id: str | int | None = Field(
        default=None,
        description="New parent task ID (use empty string to move the task to the top level)",
    )

    @field_validator("parent_id")
    @classmethod
    def validate_parent_id(cls, v: str | int | None) -> str | int | None:
        return _check_parent(v)

    def changes(self) -> dict:
        """Fields that were actually supplied."""
        return self.model_dump(exclude={"task_id"}, exclude_none=True)


class DeleteTaskInput(BaseModel):
    """Input model for deleting a task and its subtree."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: int = Field(..., description="Task ID to delete", ge=1)


class ToggleCollapseInput(BaseModel):
    """Input model for collapsing or expanding a task's subtree."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: int = Field(..., description="Task ID to collapse or expand", ge=1)


# ============================================================================
# Timeline and Project Input Models
# ============================================================================


class TimelineInput(BaseModel):
    """Input model for the timeline view."""

    model_config = ConfigDict(str_strip_whitespace=True)

    chart: bool = Field(default=True, description="Include a text Gantt chart")
    cells_per_week: int = Field(default=6, description="Chart characters per week", ge=2, le=20)
    expand_all: bool = Field(default=False, description="Ignore collapse flags")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


class ProjectSettingsInput(BaseModel):
    """Input model for viewing or changing the project start date and duration."""

    model_config = ConfigDict(str_strip_whitespace=True)

    start_date: date | None = Field(default=None, description="Project start date (YYYY-MM-DD)")
    duration_weeks: int | None = Field(default=None, description="Planned duration in weeks", ge=1, le=MAX_WEEKS)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


class DiagnoseInput(BaseModel):
    """Input model for structural diagnostics."""

    model_config = ConfigDict(str_strip_whitespace=True)

    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


# ============================================================================
# Document Input Models
# ============================================================================


class ExportInput(BaseModel):
    """Input model for exporting the plan."""

    model_config = ConfigDict(str_strip_whitespace=True)

    path: str | None = Field(default=None, description="File or directory to write to; omit to return the JSON")
    tasks_only: bool = Field(
        default=False,
        description="Emit the bare task array instead of the document with project settings",
    )


class ImportInput(BaseModel):
    """Input model for importing a plan (replaces the current one)."""

    model_config = ConfigDict(str_strip_whitespace=True)

    document: str | None = Field(default=None, description="JSON text: a task array or a plan document")
    path: str | None = Field(default=None, description="Path of a JSON file to import")

    @model_validator(mode="after")
    def validate_source(self) -> "ImportInput":
        if not self.document and not self.path:
            raise ValueError("Provide either 'document' or 'path'")
        if self.document and self.path:
            raise ValueError("Provide only one of 'document' or 'path'")
        return self


class ReloadInput(BaseModel):
    """Input model for reloading from the remote store."""

    model_config = ConfigDict(str_strip_whitespace=True)
    # No parameters needed - reload replaces the whole plan
