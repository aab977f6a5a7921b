"""Pytest configuration and fixtures for gantt-mcp tests."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from gantt_mcp.models.task import GanttSnapshot, ProjectSettings, TaskModel
from gantt_mcp.state import state


def make_task(task_id, start=0, duration=1, parent_id=None, collapsed=False, title=None):
    return TaskModel(
        id=task_id,
        title=title or f"Task {task_id}",
        start=start,
        duration=duration,
        parent_id=parent_id,
        collapsed=collapsed,
    )


@pytest.fixture
def two_level_tasks():
    """The worked example: a root bar and one child bar right after it."""
    return (
        make_task(1, start=0, duration=2),
        make_task(2, start=2, duration=2, parent_id=1),
    )


@pytest.fixture
def tree_tasks():
    """
    Two roots with nested children, in deliberately interleaved order.

    1
      3
        5
      4
    2
      6
    """
    return (
        make_task(1, start=0, duration=4),
        make_task(2, start=4, duration=3),
        make_task(3, start=0, duration=2, parent_id=1),
        make_task(4, start=2, duration=2, parent_id=1),
        make_task(5, start=0, duration=1, parent_id=3),
        make_task(6, start=4, duration=1.5, parent_id=2),
    )


@pytest.fixture
def settings():
    return ProjectSettings(start_date=date(2025, 12, 8), duration_weeks=12)


@pytest.fixture
def tree_snapshot(tree_tasks, settings):
    return GanttSnapshot(tasks=tree_tasks, settings=settings)


@pytest.fixture(autouse=True)
def fresh_state(monkeypatch, tree_snapshot):
    """Give every test the tree snapshot and no persistence observers."""
    monkeypatch.setattr(state, "_observers", [])
    monkeypatch.setattr("gantt_mcp.utils.storage._active_persister", None)
    monkeypatch.setattr("gantt_mcp.utils.storage._active_config", None)
    state.reset(tree_snapshot)
    yield state
    state.reset()


@pytest.fixture
def mock_session():
    """A requests.Session stand-in whose get/post return HTTP 200."""
    session = MagicMock()
    session.get.return_value = MagicMock(status_code=200)
    session.post.return_value = MagicMock(status_code=200)
    return session
