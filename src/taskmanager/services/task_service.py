import logging
from datetime import date, datetime, timezone
from typing import List, Optional, Protocol

from taskmanager.domain.errors import NotFoundError
from taskmanager.domain.log_models import EntityType, LogAction
from taskmanager.domain.task_list_models import TaskList
from taskmanager.domain.task_models import DeletedTask, Task, TaskCreate, TaskFilter, TaskPriority, new_task_id
from taskmanager.services.log_service import LogService
from taskmanager.services.persistence import persistence_guard

logger = logging.getLogger("taskmanager.tasks")


class TaskListResolver(Protocol):
    async def resolve_task_list(self, task_list_id: str) -> Optional[TaskList]: ...


class TaskService:
    def __init__(self, repo, task_lists: TaskListResolver, history: LogService):
        self.repo = repo
        self.task_lists = task_lists
        self.history = history

    async def _require_task_list(self, task_list_id: str) -> TaskList:
        task_list = await self.task_lists.resolve_task_list(task_list_id)
        if not task_list:
            logger.error(
                "task_list.not_found",
                extra={"category": "tasks", "event": "task_list.not_found", "task_list_id": task_list_id},
            )
            raise NotFoundError.task_list(task_list_id)
        return task_list

    async def _save(self, task: Task) -> Task:
        async with persistence_guard(logger, "task.save.failed", category="tasks", task_id=task.task_id):
            return await self.repo.save(task)

    async def get_tasks(self, filters: Optional[TaskFilter] = None) -> List[Task]:
        filters = filters or TaskFilter()
        async with persistence_guard(
            logger, "task.query.failed", category="tasks", filters=filters.model_dump(mode="json", exclude_none=True)
        ):
            return await self.repo.query(filters)

    async def get_task_by_id(self, task_id: str) -> Task:
        async with persistence_guard(logger, "task.find.failed", category="tasks", task_id=task_id):
            found = await self.repo.find(task_id)
        if not found:
            raise NotFoundError.task(task_id)
        return found

    async def delete_task_by_id(self, task_id: str) -> DeletedTask:
        found = await self.get_task_by_id(task_id)
        async with persistence_guard(logger, "task.remove.failed", category="tasks", task_id=task_id):
            await self.repo.remove(found)
        logger.info("task.delete", extra={"category": "tasks", "event": "task.delete", "task_id": task_id})
        await self.history.record(
            EntityType.TASK, task_id, LogAction.DELETE, entity_field="task_name", old_value=found.task_name,
        )
        return DeletedTask(task_name=found.task_name, task_id=found.task_id)

    async def create_task(self, data: TaskCreate) -> Task:
        await self._require_task_list(data.task_list_id)
        task = Task(
            task_id=new_task_id(),
            task_creation_time=datetime.now(timezone.utc),
            **data.model_dump(),
        )
        await self._save(task)
        logger.info(
            "task.create",
            extra={"category": "tasks", "event": "task.create", "task_id": task.task_id, "task_name": task.task_name},
        )
        await self.history.record(
            EntityType.TASK, task.task_id, LogAction.CREATE, entity_field="task_name", new_value=task.task_name,
        )
        return task

    async def update_task_priority(self, task_id: str, new_priority: TaskPriority) -> Task:
        task = await self.get_task_by_id(task_id)
        old = task.task_priority
        task.task_priority = new_priority
        await self._save(task)
        await self.history.record(
            EntityType.TASK, task_id, LogAction.UPDATE_PRIORITY,
            entity_field="task_priority", old_value=old.value, new_value=new_priority.value,
        )
        return task

    async def update_task_description(self, task_id: str, new_description: str) -> Task:
        task = await self.get_task_by_id(task_id)
        old = task.task_description
        task.task_description = new_description
        await self._save(task)
        await self.history.record(
            EntityType.TASK, task_id, LogAction.UPDATE_DESCRIPTION,
            entity_field="task_description", old_value=old, new_value=new_description,
        )
        return task

    async def update_task_name(self, task_id: str, new_name: str) -> Task:
        task = await self.get_task_by_id(task_id)
        old = task.task_name
        task.task_name = new_name
        await self._save(task)
        await self.history.record(
            EntityType.TASK, task_id, LogAction.RENAME, entity_field="task_name", old_value=old, new_value=new_name,
        )
        return task

    async def update_task_list(self, task_id: str, new_task_list_id: str) -> Task:
        """Move a task to another list; the history keeps list names, not ids."""
        new_list = await self._require_task_list(new_task_list_id)
        task = await self.get_task_by_id(task_id)
        old_list = await self.task_lists.resolve_task_list(task.task_list_id)
        task.task_list_id = new_task_list_id
        await self._save(task)
        await self.history.record(
            EntityType.TASK, task_id, LogAction.MOVE,
            entity_field="task_list_id",
            old_value=old_list.task_list_name if old_list else None,
            new_value=new_list.task_list_name,
        )
        return task

    async def update_task_due_date(self, task_id: str, new_date: Optional[date]) -> Task:
        task = await self.get_task_by_id(task_id)
        old = task.task_due_date
        task.task_due_date = new_date
        await self._save(task)
        await self.history.record(
            EntityType.TASK, task_id, LogAction.UPDATE_DUE_DATE,
            entity_field="task_due_date",
            old_value=old.isoformat() if old else None,
            new_value=new_date.isoformat() if new_date else None,
        )
        return task
