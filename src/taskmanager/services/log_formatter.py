"""Turns stored change records into the sentences shown in the history log."""
from __future__ import annotations

import re
from datetime import datetime, tzinfo
from typing import Iterable, Optional, Protocol

from taskmanager.domain.log_models import EntityType, HistoryItem, LogAction, LogMessage, LogRecord
from taskmanager.domain.task_list_models import TaskList
from taskmanager.domain.task_models import Task

TASK_MARKER = "\u25ce "  # ◎
TASK_LIST_MARKER = "\U0001f5ce "  # 🗎
UNKNOWN_ENTITY = "_"
UNKNOWN_ACTION_PHRASE = "performed unknown action on"

ACTION_PHRASES: dict[LogAction, str] = {
    LogAction.CREATE: "created",
    LogAction.DELETE: "deleted",
    LogAction.RENAME: "renamed",
    LogAction.UPDATE_PRIORITY: "updated",
    LogAction.UPDATE_DESCRIPTION: "updated",
    LogAction.UPDATE_DUE_DATE: "updated",
    LogAction.MOVE: "moved",
}

_CHANGE_ONLY = {LogAction.RENAME, LogAction.MOVE}
_FIELD_CHANGE = {LogAction.UPDATE_PRIORITY, LogAction.UPDATE_DESCRIPTION, LogAction.UPDATE_DUE_DATE}

# longest prefix first, otherwise "task_list_name" would lose only "task_"
_FIELD_PREFIX = re.compile(r"^(task_list_|task_)")


class NameLookup(Protocol):
    def task_name(self, task_id: str) -> Optional[str]: ...

    def task_list_name(self, task_list_id: str) -> Optional[str]: ...


class CollectionLookup:
    """NameLookup over in-memory snapshots of the current tasks and lists."""

    def __init__(self, tasks: Iterable[Task] = (), task_lists: Iterable[TaskList] = ()):
        self._tasks = {t.task_id: t.task_name for t in tasks}
        self._task_lists = {tl.task_list_id: tl.task_list_name for tl in task_lists}

    def task_name(self, task_id: str) -> Optional[str]:
        return self._tasks.get(task_id)

    def task_list_name(self, task_list_id: str) -> Optional[str]:
        return self._task_lists.get(task_list_id)


def parse_action(raw: str) -> Optional[LogAction]:
    """Accepts both the stored value ("UPD_PRIORITY") and the member name ("UPDATE_PRIORITY")."""
    try:
        return LogAction(raw)
    except ValueError:
        return LogAction.__members__.get(raw)


def get_field(field: Optional[str]) -> str:
    if not field:
        return ""
    return _FIELD_PREFIX.sub(" ", field, count=1)


def action_phrase(raw_action: str) -> str:
    action = parse_action(raw_action)
    if action is None:
        return UNKNOWN_ACTION_PHRASE
    return ACTION_PHRASES.get(action, UNKNOWN_ACTION_PHRASE)


def entity_name_text(record: LogRecord, lookup: NameLookup) -> str:
    fallback = record.old_value or record.new_value or ""
    if record.entity_type == EntityType.TASK.value:
        return TASK_MARKER + (lookup.task_name(record.entity_id) or fallback)
    if record.entity_type == EntityType.TASK_LIST.value:
        return TASK_LIST_MARKER + (lookup.task_list_name(record.entity_id) or fallback)
    return UNKNOWN_ENTITY


def additional_text(record: LogRecord) -> str:
    action = parse_action(record.log_action)
    old = record.old_value or ""
    new = record.new_value or ""
    if action in _CHANGE_ONLY:
        return f"from {old} to {new}"
    if action in _FIELD_CHANGE:
        return f"{get_field(record.entity_field)} from {old} to {new}"
    return ""


def format_log_date(value: datetime) -> str:
    # strftime's %p and %b follow the process locale; the history is always English
    month = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
             "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")[value.month - 1]
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{month} {value.day}, {hour}:{value.minute:02d} {meridiem}"


def format_log(record: LogRecord, lookup: NameLookup, display_tz: Optional[tzinfo] = None) -> HistoryItem:
    log_date = record.log_date
    if display_tz is not None and log_date.tzinfo is not None:
        log_date = log_date.astimezone(display_tz)
    message = LogMessage(
        action_text=f"You {action_phrase(record.log_action)} ",
        entity_name_text=entity_name_text(record, lookup),
        additional_text=additional_text(record),
    )
    return HistoryItem(log=record, message=message, date_text=format_log_date(log_date))
