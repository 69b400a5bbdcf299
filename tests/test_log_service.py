from datetime import timedelta, timezone

from taskmanager.domain.log_models import EntityType, LogAction
from taskmanager.domain.task_list_models import TaskListCreate
from taskmanager.domain.task_models import TaskCreate
from taskmanager.services.log_formatter import TASK_MARKER, format_log_date


async def test_history_is_newest_first_and_formatted(services):
    backlog = await services.task_lists.create_task_list(TaskListCreate(task_list_name="Backlog"))
    task = await services.tasks.create_task(TaskCreate(task_name="Draft", task_list_id=backlog.task_list_id))
    await services.tasks.update_task_name(task.task_id, "Final")

    items = await services.history.history()

    assert [i.log.log_action for i in items] == ["RENAME", "CREATE", "CREATE"]
    rename = items[0].message
    assert rename.action_text == "You renamed "
    assert rename.entity_name_text == TASK_MARKER + "Final"
    assert rename.additional_text == "from Draft to Final"


async def test_history_falls_back_to_values_after_delete(services):
    backlog = await services.task_lists.create_task_list(TaskListCreate(task_list_name="Backlog"))
    task = await services.tasks.create_task(TaskCreate(task_name="Gone soon", task_list_id=backlog.task_list_id))
    await services.tasks.delete_task_by_id(task.task_id)

    items = await services.history.history()

    assert items[0].message.action_text == "You deleted "
    assert items[0].message.entity_name_text == TASK_MARKER + "Gone soon"


async def test_limit_and_clear(services):
    for name in ("a", "b", "c"):
        await services.task_lists.create_task_list(TaskListCreate(task_list_name=name))

    assert len(await services.history.list_logs(limit=2)) == 2
    assert await services.history.clear() == 3
    assert await services.history.history() == []


async def test_history_uses_display_zone(make_services):
    services = make_services()
    services.history.display_tz = timezone(timedelta(hours=9))
    record = await services.history.record(EntityType.TASK, "t1", LogAction.CREATE, new_value="x")

    item = (await services.history.history())[0]

    assert item.date_text == format_log_date(record.log_date.astimezone(timezone(timedelta(hours=9))))
