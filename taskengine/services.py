"""Call-boundary helpers wiring the pure engine to a clock and a repository.

Everything below `services` takes the current time as an argument; these
wrappers are the only place that reads the real clock (`utils.now_utc`) when
the caller doesn't pass `now`.
"""
from datetime import datetime
import logging

from . import config
from .braindump import parse_brain_dump
from .dependencies import (
    DependencyCycleError,
    build_graph,
    count_blocked,
    count_blocking,
    would_create_cycle,
)
from .models import ParsedTask, Task, TaskSnapshot
from .parser import parse_task_text
from .recurrence import generate_instances
from .repository import TaskRepository, require_task
from .urgency import UrgencyConfig, calculate_urgency
from .utils import now_utc

logger = logging.getLogger(__name__)


def quick_add(text: str | None, now: datetime | None = None) -> ParsedTask:
    """Parse one task's text, resolving dates against the current time."""
    return parse_task_text(text, now or now_utc())


def brain_dump(blob: str | None, now: datetime | None = None) -> list[ParsedTask]:
    """Parse a multi-task blob, resolving dates against the current time."""
    return parse_brain_dump(blob, now or now_utc())


def score_task(task: Task, tasks: list[Task], now: datetime | None = None, cfg: UrgencyConfig | None = None) -> float:
    """Urgency of `task`, with dependency counts taken from `tasks`."""
    return calculate_urgency(
        TaskSnapshot.from_task(task),
        count_blocking(task.uuid, tasks),
        count_blocked(task.uuid, tasks),
        now or now_utc(),
        cfg or UrgencyConfig.from_settings(),
    )


def refresh_urgency(repo: TaskRepository, now: datetime | None = None) -> list[Task]:
    """Recompute and store the urgency of every task; returns the updated tasks."""
    now = now or now_utc()
    cfg = UrgencyConfig.from_settings()
    tasks = repo.get_all_tasks()
    updated = []
    for t in tasks:
        u = score_task(t, tasks, now, cfg)
        if u != t.urgency:
            t = t.model_copy(update={'urgency': u})
            repo.update_task(t)
        updated.append(t)
    return updated


def generate_recurring_tasks(
    repo: TaskRepository,
    template_uuid: str,
    count: int | None = None,
    now: datetime | None = None,
) -> list[Task]:
    """Generate and store the next instances of a recurring template.

    Instance numbering continues after the instances already stored for the
    template. Raises RecurrenceError for templates without a usable
    recurrence code and TaskNotFoundError for unknown uuids.
    """
    template = require_task(repo, template_uuid)
    existing = [t.imask for t in repo.get_tasks_by_parent(template.uuid)]
    instances = generate_instances(
        template,
        config.DEFAULT_INSTANCE_COUNT if count is None else count,
        existing,
        now or now_utc(),
    )
    for inst in instances:
        try:
            repo.insert_task(inst)
        except Exception:
            logger.exception('failed to insert recurring instance %s of %s', inst.imask, template.uuid)
            raise
    logger.info('generated %d instance(s) of %s', len(instances), template.uuid)
    return instances


def add_dependency(
    repo: TaskRepository,
    task_uuid: str,
    dependency_uuid: str,
    now: datetime | None = None,
) -> Task:
    """Make task_uuid depend on dependency_uuid and store the result.

    Raises DependencyCycleError if the edge would close a cycle. Adding an
    existing dependency is a no-op.
    """
    task = require_task(repo, task_uuid)
    require_task(repo, dependency_uuid)
    if dependency_uuid in task.dependencies:
        return task
    graph = build_graph(repo.get_all_tasks())
    if would_create_cycle(task_uuid, dependency_uuid, graph):
        raise DependencyCycleError(task_uuid, dependency_uuid)
    updated = task.model_copy(update={
        'dependencies': [*task.dependencies, dependency_uuid],
        'modified': now or now_utc(),
    })
    try:
        repo.update_task(updated)
    except Exception:
        logger.exception('failed to store dependency %s -> %s', task_uuid, dependency_uuid)
        raise
    return updated
