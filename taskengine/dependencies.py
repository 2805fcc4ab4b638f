"""Dependency graph checks.

The graph maps task uuid -> TaskGraphNode; an edge A -> B means "A depends
on B", so B has to be completed first.
"""
import logging
from typing import Iterable, Mapping

from .models import Task, TaskGraphNode, TaskStatus

logger = logging.getLogger(__name__)

# statuses that still hold up the tasks depending on them
OUTSTANDING_STATUSES = frozenset({TaskStatus.PENDING, TaskStatus.WAITING})


class DependencyCycleError(ValueError):
    """Adding a dependency edge would create a cycle."""

    def __init__(self, task_uuid: str, dependency_uuid: str):
        super().__init__(f'{task_uuid} depending on {dependency_uuid} would create a dependency cycle')
        self.task_uuid = task_uuid
        self.dependency_uuid = dependency_uuid


def build_graph(tasks: Iterable[Task]) -> dict[str, TaskGraphNode]:
    return {t.uuid: TaskGraphNode.from_task(t) for t in tasks}


def _has_path(start: str, target: str, graph: Mapping[str, TaskGraphNode]) -> bool:
    """Depth-first search for a path start -> ... -> target.

    `visited` holds nodes already expanded (never expanded twice), `on_path`
    the nodes on the current DFS path. Reaching a node on the current path
    means a cycle is already reachable from start, which also counts as
    True. Uuids absent from the graph end their branch.
    """
    if start == target:
        return True
    node = graph.get(start)
    if node is None:
        return False
    visited = {start}
    on_path = {start}
    stack = [(start, iter(node.dependencies))]
    while stack:
        current, deps = stack[-1]
        for dep in deps:
            if dep == target or dep in on_path:
                return True
            if dep in visited:
                continue
            visited.add(dep)
            child = graph.get(dep)
            if child is None:
                logger.debug('dependency %s of %s is not in the graph', dep, current)
                continue
            on_path.add(dep)
            stack.append((dep, iter(child.dependencies)))
            break
        else:
            stack.pop()
            on_path.discard(current)
    return False


def would_create_cycle(task_uuid: str, dependency_uuid: str, graph: Mapping[str, TaskGraphNode]) -> bool:
    """Return True if making task_uuid depend on dependency_uuid would close a cycle.

    A task depending on itself is always a cycle. Otherwise the new edge
    closes a loop exactly when dependency_uuid can already reach task_uuid.
    """
    if task_uuid == dependency_uuid:
        return True
    return _has_path(dependency_uuid, task_uuid, graph)


def count_blocking(task_uuid: str, tasks: Iterable[Task]) -> int:
    """Number of outstanding tasks that depend on task_uuid."""
    return sum(
        1 for t in tasks
        if t.uuid != task_uuid and t.status in OUTSTANDING_STATUSES and task_uuid in t.dependencies
    )


def count_blocked(task_uuid: str, tasks: Iterable[Task]) -> int:
    """Number of task_uuid's dependencies that are known and still outstanding."""
    by_uuid = {t.uuid: t for t in tasks}
    task = by_uuid.get(task_uuid)
    if task is None:
        return 0
    count = 0
    for dep in dict.fromkeys(task.dependencies):
        other = by_uuid.get(dep)
        if other is not None and other.status in OUTSTANDING_STATUSES:
            count += 1
    return count
