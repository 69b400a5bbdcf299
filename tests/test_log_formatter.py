from datetime import datetime, timedelta, timezone

import pytest

from taskmanager.domain.log_models import LogRecord
from taskmanager.domain.task_list_models import TaskList
from taskmanager.domain.task_models import Task
from taskmanager.services.log_formatter import (
    TASK_LIST_MARKER,
    TASK_MARKER,
    UNKNOWN_ACTION_PHRASE,
    CollectionLookup,
    format_log,
    format_log_date,
    get_field,
)

NOW = datetime(2024, 3, 5, 15, 42, tzinfo=timezone.utc)


def _record(**overrides) -> LogRecord:
    data = dict(
        log_id="log-1",
        entity_type="Task",
        entity_id="t1",
        entity_field="task_name",
        log_action="CREATE",
        log_date=NOW,
        old_value=None,
        new_value=None,
    )
    data.update(overrides)
    return LogRecord(**data)


@pytest.fixture
def lookup() -> CollectionLookup:
    task = Task(task_id="t1", task_name="Write report", task_list_id="l1", task_creation_time=NOW)
    task_list = TaskList(task_list_id="l1", task_list_name="Backlog", task_list_creation_time=NOW)
    return CollectionLookup([task], [task_list])


@pytest.mark.parametrize(
    "field, expected",
    [
        ("task_priority", " priority"),
        ("task_list_name", " name"),
        ("task_due_date", " due_date"),
        ("priority", "priority"),
        ("", ""),
        (None, ""),
    ],
)
def test_get_field_strips_entity_prefix(field, expected):
    assert get_field(field) == expected


@pytest.mark.parametrize(
    "action, phrase",
    [
        ("CREATE", "created"),
        ("DELETE", "deleted"),
        ("RENAME", "renamed"),
        ("UPD_PRIORITY", "updated"),
        ("UPDATE_DESCRIPTION", "updated"),
        ("UPD_DUE_DATE", "updated"),
        ("MOVE", "moved"),
    ],
)
def test_known_actions_map_to_phrases(lookup, action, phrase):
    item = format_log(_record(log_action=action), lookup)
    assert item.message.action_text == f"You {phrase} "


@pytest.mark.parametrize("action", ["ARCHIVE", "", "create", "UPD_STATUS"])
def test_unknown_action_uses_fallback_and_no_detail(lookup, action):
    item = format_log(_record(log_action=action, old_value="a", new_value="b"), lookup)
    assert item.message.action_text == f"You {UNKNOWN_ACTION_PHRASE} "
    assert item.message.additional_text == ""


def test_existing_task_name_wins_over_values(lookup):
    item = format_log(_record(old_value="Old", new_value="New"), lookup)
    assert item.message.entity_name_text == TASK_MARKER + "Write report"


@pytest.mark.parametrize(
    "old, new, expected",
    [("Draft", "Final", "Draft"), (None, "Final", "Final"), ("", "Final", "Final"), (None, None, "")],
)
def test_missing_task_falls_back_to_values(lookup, old, new, expected):
    item = format_log(_record(entity_id="gone", old_value=old, new_value=new), lookup)
    assert item.message.entity_name_text == TASK_MARKER + expected


def test_task_list_subject(lookup):
    found = format_log(_record(entity_type="Task list", entity_id="l1"), lookup)
    missing = format_log(_record(entity_type="Task list", entity_id="l9", old_value="Archive"), lookup)
    assert found.message.entity_name_text == TASK_LIST_MARKER + "Backlog"
    assert missing.message.entity_name_text == TASK_LIST_MARKER + "Archive"


def test_unknown_entity_type_is_placeholder(lookup):
    item = format_log(_record(entity_type="Board", old_value="x"), lookup)
    assert item.message.entity_name_text == "_"


def test_rename_detail(lookup):
    item = format_log(_record(log_action="RENAME", old_value="Draft", new_value="Final"), lookup)
    assert item.message.additional_text == "from Draft to Final"


def test_move_detail(lookup):
    item = format_log(_record(log_action="MOVE", old_value="Backlog", new_value="Done"), lookup)
    assert item.message.additional_text == "from Backlog to Done"


def test_field_update_detail(lookup):
    item = format_log(
        _record(log_action="UPD_PRIORITY", entity_field="task_priority", old_value="LOW", new_value="HIGH"),
        lookup,
    )
    assert item.message.additional_text == " priority from LOW to HIGH"


@pytest.mark.parametrize("action", ["CREATE", "DELETE"])
def test_create_and_delete_have_no_detail(lookup, action):
    item = format_log(_record(log_action=action, old_value="a", new_value="b"), lookup)
    assert item.message.additional_text == ""


@pytest.mark.parametrize(
    "value, expected",
    [
        (datetime(2024, 3, 5, 15, 42), "Mar 5, 3:42 PM"),
        (datetime(2024, 12, 31, 0, 5), "Dec 31, 12:05 AM"),
        (datetime(2024, 7, 1, 12, 0), "Jul 1, 12:00 PM"),
        (datetime(2024, 1, 9, 9, 7), "Jan 9, 9:07 AM"),
    ],
)
def test_format_log_date(value, expected):
    assert format_log_date(value) == expected


def test_format_log_returns_date_text(lookup):
    assert format_log(_record(), lookup).date_text == "Mar 5, 3:42 PM"


@pytest.mark.parametrize(
    "action, field, old, new, expected",
    [
        ("UPD_DESCRIPTION", "task_description", "old notes", "new notes", " description from old notes to new notes"),
        ("UPD_DUE_DATE", "task_due_date", "2024-05-01", "2024-06-01", " due_date from 2024-05-01 to 2024-06-01"),
        ("UPDATE_DUE_DATE", "task_due_date", None, "2024-06-01", " due_date from  to 2024-06-01"),
        ("UPD_DESCRIPTION", "task_list_description", "a", "b", " description from a to b"),
        ("UPD_PRIORITY", "", "LOW", "HIGH", " from LOW to HIGH"),
    ],
)
def test_field_update_details(lookup, action, field, old, new, expected):
    item = format_log(_record(log_action=action, entity_field=field, old_value=old, new_value=new), lookup)
    assert item.message.action_text == "You updated "
    assert item.message.additional_text == expected


def test_deleted_task_list_falls_back_to_new_value(lookup):
    item = format_log(_record(entity_type="Task list", entity_id="l9", old_value=None, new_value="Someday"), lookup)
    assert item.message.entity_name_text == TASK_LIST_MARKER + "Someday"


def test_display_zone_shifts_aware_timestamps(lookup):
    eastern = timezone(timedelta(hours=-5))
    assert format_log(_record(), lookup, eastern).date_text == "Mar 5, 10:42 AM"
    assert format_log(_record(log_date=datetime(2024, 3, 5, 2, 15, tzinfo=timezone.utc)), lookup, eastern).date_text == (
        "Mar 4, 9:15 PM"
    )


def test_naive_timestamps_are_left_alone(lookup):
    eastern = timezone(timedelta(hours=-5))
    assert format_log(_record(log_date=datetime(2024, 3, 5, 15, 42)), lookup, eastern).date_text == "Mar 5, 3:42 PM"
