from fastapi import APIRouter
from taskmanager.domain.task_list_models import DeletedTaskList, TaskList, TaskListCreate, TaskListNameUpdate
from taskmanager.services.task_list_service import TaskListService

router = APIRouter(prefix="/api/task-lists", tags=["task-lists"])


def get_service() -> TaskListService:
    # Overwritten in main.py
    raise RuntimeError("TaskListService not wired")


@router.get("", response_model=list[TaskList])
async def get_task_lists():
    return await get_service().get_task_lists()


@router.get("/{task_list_id}", response_model=TaskList)
async def get_task_list(task_list_id: str):
    return await get_service().get_task_list_by_id(task_list_id)


@router.post("", response_model=TaskList, status_code=201)
async def create_task_list(payload: TaskListCreate):
    return await get_service().create_task_list(payload)


@router.patch("/{task_list_id}/name", response_model=TaskList)
async def rename_task_list(task_list_id: str, payload: TaskListNameUpdate):
    return await get_service().rename_task_list(task_list_id, payload.task_list_name)


@router.delete("/{task_list_id}", response_model=DeletedTaskList)
async def delete_task_list(task_list_id: str):
    return await get_service().delete_task_list(task_list_id)
