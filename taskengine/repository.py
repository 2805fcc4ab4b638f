"""Task storage interface expected from the host application.

The engine itself never stores anything; the service wrappers in
`taskengine.services` read and write tasks through this protocol.
`InMemoryTaskRepository` is a dict-backed implementation for tests and
embedding.
"""
from typing import Iterable, Protocol

from .models import Task


class TaskNotFoundError(LookupError):
    def __init__(self, uuid: str):
        super().__init__(f'task not found: {uuid}')
        self.uuid = uuid


class TaskRepository(Protocol):
    def get_all_tasks(self) -> list[Task]: ...

    def get_task_by_uuid(self, uuid: str) -> Task | None: ...

    def get_tasks_by_parent(self, parent_uuid: str) -> list[Task]: ...

    def insert_task(self, task: Task) -> None: ...

    def update_task(self, task: Task) -> None: ...


class InMemoryTaskRepository:
    def __init__(self, tasks: Iterable[Task] = ()):
        self._tasks: dict[str, Task] = {}
        for t in tasks:
            self.insert_task(t)

    def get_all_tasks(self) -> list[Task]:
        return list(self._tasks.values())

    def get_task_by_uuid(self, uuid: str) -> Task | None:
        return self._tasks.get(uuid)

    def get_tasks_by_parent(self, parent_uuid: str) -> list[Task]:
        return [t for t in self._tasks.values() if t.parent == parent_uuid]

    def insert_task(self, task: Task) -> None:
        if task.uuid in self._tasks:
            raise ValueError(f'task already exists: {task.uuid}')
        self._tasks[task.uuid] = task

    def update_task(self, task: Task) -> None:
        if task.uuid not in self._tasks:
            raise TaskNotFoundError(task.uuid)
        self._tasks[task.uuid] = task

    def __len__(self) -> int:
        return len(self._tasks)


def require_task(repo: TaskRepository, uuid: str) -> Task:
    """Fetch a task or raise TaskNotFoundError."""
    task = repo.get_task_by_uuid(uuid)
    if task is None:
        raise TaskNotFoundError(uuid)
    return task
