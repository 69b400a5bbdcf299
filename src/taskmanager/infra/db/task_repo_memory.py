from __future__ import annotations
from typing import Dict, List, Optional

from taskmanager.domain.log_models import LogRecord
from taskmanager.domain.task_list_models import TaskList
from taskmanager.domain.task_models import Task, TaskFilter

class InMemoryTaskRepo:
    """
    Dict-backed task store with the same async surface as SQLiteTaskRepo.
    Used by the service tests; swap for the SQLite repo without touching services.
    """
    def __init__(self):
        self._tasks: Dict[str, Task] = {}

    async def find(self, task_id: str) -> Optional[Task]:
        task = self._tasks.get(task_id)
        return task.model_copy() if task else None

    async def save(self, task: Task) -> Task:
        self._tasks[task.task_id] = task.model_copy()
        return task

    async def remove(self, task: Task) -> Task:
        del self._tasks[task.task_id]
        return task

    async def query(self, filters: Optional[TaskFilter] = None) -> List[Task]:
        filters = filters or TaskFilter()
        found = [t.model_copy() for t in self._tasks.values() if filters.matches(t)]
        return sorted(found, key=lambda t: t.task_creation_time)


class InMemoryTaskListRepo:
    def __init__(self, task_repo: Optional[InMemoryTaskRepo] = None):
        self._lists: Dict[str, TaskList] = {}
        self._task_repo = task_repo

    async def find(self, task_list_id: str) -> Optional[TaskList]:
        task_list = self._lists.get(task_list_id)
        return task_list.model_copy() if task_list else None

    async def save(self, task_list: TaskList) -> TaskList:
        self._lists[task_list.task_list_id] = task_list.model_copy()
        return task_list

    async def remove(self, task_list: TaskList) -> TaskList:
        # mirrors the SQLite repo: the list takes its tasks with it
        if self._task_repo is not None:
            tasks = self._task_repo._tasks
            for task_id in [t.task_id for t in tasks.values() if t.task_list_id == task_list.task_list_id]:
                del tasks[task_id]
        del self._lists[task_list.task_list_id]
        return task_list

    async def query(self) -> List[TaskList]:
        return sorted(
            (tl.model_copy() for tl in self._lists.values()),
            key=lambda tl: tl.task_list_creation_time,
        )


class InMemoryLogRepo:
    def __init__(self):
        self._logs: List[LogRecord] = []

    async def add(self, record: LogRecord) -> LogRecord:
        self._logs.append(record)
        return record

    async def list(self, limit: Optional[int] = None) -> List[LogRecord]:
        # newest first
        logs = sorted(reversed(self._logs), key=lambda r: r.log_date, reverse=True)
        return logs[:limit] if limit else logs

    async def clear(self) -> int:
        count = len(self._logs)
        self._logs.clear()
        return count
