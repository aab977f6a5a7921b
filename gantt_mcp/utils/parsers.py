"""Parser helpers for persisted Gantt documents."""

import json
from typing import Any

from pydantic import ValidationError

from gantt_mcp.models.task import DocumentPatch, ProjectSettings, TaskModel


class DocumentError(ValueError):
    """Raised when a persisted document cannot be understood."""


def _parse_task(task_dict: dict[str, Any]) -> TaskModel:
    """
    Parse a task dictionary into a TaskModel.

    Args:
        task_dict: Dictionary using the document keys (``parentId`` etc.)

    Returns:
        TaskModel instance with validated data
    """
    return TaskModel.model_validate(task_dict)


def _parse_tasks(tasks: list[dict[str, Any]]) -> tuple[TaskModel, ...]:
    """
    Parse a list of task dictionaries into TaskModel instances.

    Args:
        tasks: List of dictionaries from a persisted document

    Returns:
        Tuple of TaskModel instances, in document order
    """
    return tuple(TaskModel.model_validate(t) for t in tasks)


def _parse_document(raw: Any) -> DocumentPatch:
    """
    Normalize either document form into a DocumentPatch.

    A bare list is the legacy form and carries tasks only. An object may carry
    ``tasks``, ``projectStartDate`` and ``projectDurationWeeks``; falsy
    settings values are treated as absent. Strings are decoded as JSON first.

    Raises:
        DocumentError: If the document is not JSON, has the wrong shape, or
            holds an invalid task or setting.
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw) if raw.strip() else []
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DocumentError(f"Failed to parse document - {str(e)}") from e

    try:
        if isinstance(raw, list):
            return DocumentPatch(tasks=_parse_tasks(raw), legacy=True)

        if isinstance(raw, dict):
            tasks = raw.get("tasks")
            if tasks is not None and not isinstance(tasks, list):
                raise DocumentError("'tasks' must be a list")
            settings = {}
            if raw.get("projectStartDate"):
                settings["projectStartDate"] = raw["projectStartDate"]
            if raw.get("projectDurationWeeks"):
                settings["projectDurationWeeks"] = raw["projectDurationWeeks"]
            parsed = ProjectSettings.model_validate(settings)
            return DocumentPatch(
                tasks=_parse_tasks(tasks) if tasks is not None else None,
                start_date=parsed.start_date if "projectStartDate" in settings else None,
                duration_weeks=parsed.duration_weeks if "projectDurationWeeks" in settings else None,
            )
    except ValidationError as e:
        raise DocumentError(f"Invalid document - {e.error_count()} validation error(s)") from e

    raise DocumentError(f"Unsupported document type: {type(raw).__name__}")
