from __future__ import annotations
from pydantic import BaseModel, Field
from enum import Enum
from datetime import date, datetime
from typing import Optional
import uuid

class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

class TaskCreate(BaseModel):
    task_name: str = Field(min_length=1, max_length=140)
    task_description: Optional[str] = Field(default=None, max_length=4000)
    task_due_date: Optional[date] = None
    task_priority: TaskPriority = TaskPriority.MEDIUM
    task_list_id: str

class Task(TaskCreate):
    task_id: str
    task_creation_time: datetime

class TaskFilter(BaseModel):
    task_priority: Optional[TaskPriority] = None
    search: Optional[str] = None
    task_creation_time: Optional[date] = None
    task_list_id: Optional[str] = None

    def matches(self, task: Task) -> bool:
        if self.task_list_id and task.task_list_id != self.task_list_id:
            return False
        if self.task_priority and task.task_priority != self.task_priority:
            return False
        if self.search:
            needle = self.search.lower()
            haystack = (task.task_name.lower(), (task.task_description or "").lower())
            if not any(needle in h for h in haystack):
                return False
        if self.task_creation_time and task.task_creation_time.date() != self.task_creation_time:
            return False
        return True

# Single-field update payloads (PATCH bodies)
class TaskPriorityUpdate(BaseModel):
    task_priority: TaskPriority

class TaskDescriptionUpdate(BaseModel):
    task_description: str = Field(max_length=4000)

class TaskNameUpdate(BaseModel):
    task_name: str = Field(min_length=1, max_length=140)

class TaskListIdUpdate(BaseModel):
    task_list_id: str

class TaskDueDateUpdate(BaseModel):
    task_due_date: Optional[date] = None

class DeletedTask(BaseModel):
    task_name: str
    task_id: str

def new_task_id() -> str:
    return str(uuid.uuid4())
