"""Parent/child resolution over the flat task collection."""

import logging
from collections.abc import Iterable

from gantt_mcp.models.task import TaskModel
from gantt_mcp.models.views import TreeIssue

logger = logging.getLogger("gantt_mcp.tree")

# Returned by TaskTree.depth() when the parent chain loops back on itself.
CYCLE_DEPTH = -1


class TaskTree:
    """
    Child lookup, root detection and depth for a task collection.

    The tree is implicit in ``parent_id`` links and rebuilt for every
    snapshot; nothing here is cached between snapshots. Dangling parents are
    treated as orphans and cyclic chains are cut with a visited set, so none
    of the walks can fail or loop.
    """

    def __init__(self, tasks: Iterable[TaskModel]):
        self.tasks: tuple[TaskModel, ...] = tuple(tasks)
        self._by_id: dict[int, TaskModel] = {}
        self._children: dict[int, list[TaskModel]] = {}
        for task in self.tasks:
            # First occurrence wins if ids collide.
            self._by_id.setdefault(task.id, task)
            if task.parent_id is not None:
                self._children.setdefault(task.parent_id, []).append(task)

    def get(self, task_id: int) -> TaskModel | None:
        return self._by_id.get(task_id)

    def roots(self) -> list[TaskModel]:
        return [t for t in self.tasks if self.is_root(t)]

    @staticmethod
    def is_root(task: TaskModel) -> bool:
        return task.parent_id is None

    def children(self, task_id: int) -> list[TaskModel]:
        return list(self._children.get(task_id, ()))

    def has_children(self, task_id: int) -> bool:
        return bool(self._children.get(task_id))

    def is_orphan(self, task: TaskModel) -> bool:
        return task.parent_id is not None and task.parent_id not in self._by_id

    def depth(self, task_id: int) -> int:
        """
        Distance from the task to its nearest root ancestor.

        Returns 0 for roots and for orphans (parent id not in the collection),
        and CYCLE_DEPTH when the chain revisits a task.
        """
        task = self._by_id.get(task_id)
        if task is None:
            return 0

        visited = {task.id}
        depth = 0
        while task.parent_id is not None:
            parent = self._by_id.get(task.parent_id)
            if parent is None:
                logger.warning("Task %s references missing parent %s", task.id, task.parent_id)
                break
            if parent.id in visited:
                logger.warning("Parent chain of task %s contains a cycle", task_id)
                return CYCLE_DEPTH
            visited.add(parent.id)
            task = parent
            depth += 1
        return depth

    def descendants(self, task_id: int) -> set[int]:
        """All ids whose parent chain leads to ``task_id`` (excluding itself)."""
        found: set[int] = set()
        pending = [task_id]
        while pending:
            current = pending.pop()
            for child in self._children.get(current, ()):
                if child.id in found or child.id == task_id:
                    continue
                found.add(child.id)
                pending.append(child.id)
        return found

    def anomalies(self) -> list[TreeIssue]:
        """Report orphans and tasks whose ancestry loops."""
        issues: list[TreeIssue] = []
        for task in self.tasks:
            if self.is_orphan(task):
                issues.append(
                    TreeIssue(
                        kind="orphan",
                        task_id=task.id,
                        detail=f"parent {task.parent_id} does not exist",
                    )
                )
            elif self.depth(task.id) == CYCLE_DEPTH:
                issues.append(
                    TreeIssue(kind="cycle", task_id=task.id, detail="parent chain loops back on itself")
                )
        return issues
