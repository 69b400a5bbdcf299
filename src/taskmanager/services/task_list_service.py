import logging
from datetime import datetime, timezone
from typing import List, Optional

from taskmanager.domain.errors import NotFoundError
from taskmanager.domain.log_models import EntityType, LogAction
from taskmanager.domain.task_list_models import DeletedTaskList, TaskList, TaskListCreate, new_task_list_id
from taskmanager.services.log_service import LogService
from taskmanager.services.persistence import persistence_guard

logger = logging.getLogger("taskmanager.task_lists")


class TaskListService:
    def __init__(self, repo, history: LogService):
        self.repo = repo
        self.history = history

    async def get_task_lists(self) -> List[TaskList]:
        async with persistence_guard(logger, "task_list.query.failed", category="task_lists"):
            return await self.repo.query()

    async def resolve_task_list(self, task_list_id: str) -> Optional[TaskList]:
        async with persistence_guard(logger, "task_list.find.failed", category="task_lists", task_list_id=task_list_id):
            return await self.repo.find(task_list_id)

    async def get_task_list_by_id(self, task_list_id: str) -> TaskList:
        found = await self.resolve_task_list(task_list_id)
        if not found:
            raise NotFoundError.task_list(task_list_id)
        return found

    async def create_task_list(self, data: TaskListCreate) -> TaskList:
        task_list = TaskList(
            task_list_id=new_task_list_id(),
            task_list_name=data.task_list_name,
            task_list_creation_time=datetime.now(timezone.utc),
        )
        async with persistence_guard(logger, "task_list.save.failed", category="task_lists"):
            await self.repo.save(task_list)
        logger.info(
            "task_list.create",
            extra={"category": "task_lists", "event": "task_list.create", "task_list_id": task_list.task_list_id},
        )
        await self.history.record(
            EntityType.TASK_LIST, task_list.task_list_id, LogAction.CREATE,
            entity_field="task_list_name", new_value=task_list.task_list_name,
        )
        return task_list

    async def rename_task_list(self, task_list_id: str, new_name: str) -> TaskList:
        task_list = await self.get_task_list_by_id(task_list_id)
        old_name = task_list.task_list_name
        task_list.task_list_name = new_name
        async with persistence_guard(logger, "task_list.save.failed", category="task_lists", task_list_id=task_list_id):
            await self.repo.save(task_list)
        await self.history.record(
            EntityType.TASK_LIST, task_list_id, LogAction.RENAME,
            entity_field="task_list_name", old_value=old_name, new_value=new_name,
        )
        return task_list

    async def delete_task_list(self, task_list_id: str) -> DeletedTaskList:
        """Delete a list together with the tasks it holds, in one repository call."""
        task_list = await self.get_task_list_by_id(task_list_id)
        async with persistence_guard(logger, "task_list.remove.failed", category="task_lists", task_list_id=task_list_id):
            await self.repo.remove(task_list)
        logger.info(
            "task_list.delete",
            extra={"category": "task_lists", "event": "task_list.delete", "task_list_id": task_list_id},
        )
        await self.history.record(
            EntityType.TASK_LIST, task_list_id, LogAction.DELETE,
            entity_field="task_list_name", old_value=task_list.task_list_name,
        )
        return DeletedTaskList(task_list_name=task_list.task_list_name, task_list_id=task_list_id)
