"""Flatten the task tree into the ordered, numbered display sequence."""

from collections.abc import Iterable

from gantt_mcp.core.tree import TaskTree
from gantt_mcp.models.task import TaskModel
from gantt_mcp.models.views import VisibleRow


def flatten_visible(tasks: Iterable[TaskModel], expand_all: bool = False) -> list[VisibleRow]:
    """
    Build the visible rows in depth-first pre-order.

    Roots come first in collection order; each task is followed by its
    children (collection order) unless it is collapsed. Display numbers are
    positional ("2.1" is the first child of the second root) and rebuilt on
    every call.

    Args:
        tasks: Current task collection
        expand_all: Ignore collapse flags and emit every reachable task

    Returns:
        List of VisibleRow in display order
    """
    tree = TaskTree(tasks)
    rows: list[VisibleRow] = []
    emitted: set[int] = set()

    # Stack of (task, number, depth); pushed in reverse to pop in order.
    stack = [(task, str(i), 0) for i, task in enumerate(tree.roots(), start=1)]
    stack.reverse()

    while stack:
        task, number, depth = stack.pop()
        if task.id in emitted:
            continue
        emitted.add(task.id)

        children = tree.children(task.id)
        rows.append(VisibleRow(task=task, display_number=number, depth=depth, has_children=bool(children)))

        if task.collapsed and not expand_all:
            continue
        for position in range(len(children), 0, -1):
            stack.append((children[position - 1], f"{number}.{position}", depth + 1))

    return rows


def hidden_task_ids(tasks: Iterable[TaskModel]) -> set[int]:
    """Ids present in the collection but absent from the visible sequence."""
    tasks = tuple(tasks)
    visible = {row.task.id for row in flatten_visible(tasks)}
    return {t.id for t in tasks if t.id not in visible}
