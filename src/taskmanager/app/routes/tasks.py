from datetime import date
from typing import Optional

from fastapi import APIRouter
from taskmanager.domain.task_models import (
    DeletedTask,
    Task,
    TaskCreate,
    TaskDescriptionUpdate,
    TaskDueDateUpdate,
    TaskFilter,
    TaskListIdUpdate,
    TaskNameUpdate,
    TaskPriority,
    TaskPriorityUpdate,
)
from taskmanager.services.task_service import TaskService

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def get_service() -> TaskService:
    # Overwritten in main.py:
    # tasks.get_service = lambda: svc
    raise RuntimeError("TaskService not wired")


@router.get("", response_model=list[Task])
async def get_tasks(
    task_priority: Optional[TaskPriority] = None,
    search: Optional[str] = None,
    task_creation_time: Optional[date] = None,
    task_list_id: Optional[str] = None,
):
    filters = TaskFilter(
        task_priority=task_priority,
        search=search,
        task_creation_time=task_creation_time,
        task_list_id=task_list_id,
    )
    return await get_service().get_tasks(filters)


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: str):
    return await get_service().get_task_by_id(task_id)


@router.post("", response_model=Task, status_code=201)
async def create_task(payload: TaskCreate):
    return await get_service().create_task(payload)


@router.delete("/{task_id}", response_model=DeletedTask)
async def delete_task(task_id: str):
    return await get_service().delete_task_by_id(task_id)


@router.patch("/{task_id}/priority", response_model=Task)
async def update_task_priority(task_id: str, payload: TaskPriorityUpdate):
    return await get_service().update_task_priority(task_id, payload.task_priority)


@router.patch("/{task_id}/description", response_model=Task)
async def update_task_description(task_id: str, payload: TaskDescriptionUpdate):
    return await get_service().update_task_description(task_id, payload.task_description)


@router.patch("/{task_id}/name", response_model=Task)
async def update_task_name(task_id: str, payload: TaskNameUpdate):
    return await get_service().update_task_name(task_id, payload.task_name)


@router.patch("/{task_id}/task-list", response_model=Task)
async def update_task_list(task_id: str, payload: TaskListIdUpdate):
    return await get_service().update_task_list(task_id, payload.task_list_id)


@router.patch("/{task_id}/due-date", response_model=Task)
async def update_task_due_date(task_id: str, payload: TaskDueDateUpdate):
    return await get_service().update_task_due_date(task_id, payload.task_due_date)
