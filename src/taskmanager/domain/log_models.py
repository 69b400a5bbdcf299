from __future__ import annotations
from pydantic import BaseModel, ConfigDict
from enum import Enum
from datetime import datetime
from typing import Optional
import uuid

class EntityType(str, Enum):
    TASK = "Task"
    TASK_LIST = "Task list"

class LogAction(str, Enum):
    CREATE = "CREATE"
    DELETE = "DELETE"
    RENAME = "RENAME"
    UPDATE_PRIORITY = "UPD_PRIORITY"
    UPDATE_DESCRIPTION = "UPD_DESCRIPTION"
    UPDATE_DUE_DATE = "UPD_DUE_DATE"
    MOVE = "MOVE"

class LogRecord(BaseModel):
    """One historical change to a task or task list.

    `entity_type` and `log_action` are kept as plain strings so records
    written by older clients (or by hand) still load and render.
    """
    model_config = ConfigDict(frozen=True)

    log_id: str
    entity_type: str
    entity_id: str
    entity_field: str = ""
    log_action: str
    log_date: datetime
    old_value: Optional[str] = None
    new_value: Optional[str] = None

class LogMessage(BaseModel):
    action_text: str
    entity_name_text: str
    additional_text: str

class HistoryItem(BaseModel):
    log: LogRecord
    message: LogMessage
    date_text: str

def new_log_id() -> str:
    return str(uuid.uuid4())
