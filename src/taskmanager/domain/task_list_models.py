from __future__ import annotations
from pydantic import BaseModel, Field
from datetime import datetime
import uuid

class TaskListCreate(BaseModel):
    task_list_name: str = Field(min_length=1, max_length=140)

class TaskList(TaskListCreate):
    task_list_id: str
    task_list_creation_time: datetime

class TaskListNameUpdate(TaskListCreate):
    pass

class DeletedTaskList(BaseModel):
    task_list_name: str
    task_list_id: str

def new_task_list_id() -> str:
    return str(uuid.uuid4())
