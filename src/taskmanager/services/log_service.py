import logging
from datetime import datetime, timezone, tzinfo
from typing import List, Optional

from taskmanager.domain.log_models import EntityType, HistoryItem, LogAction, LogRecord, new_log_id
from taskmanager.services.log_formatter import CollectionLookup, format_log
from taskmanager.services.persistence import persistence_guard

logger = logging.getLogger("taskmanager.history")


class LogService:
    def __init__(
        self,
        repo,
        task_repo,
        task_list_repo,
        default_limit: Optional[int] = None,
        display_tz: Optional[tzinfo] = None,
    ):
        self.repo = repo
        self.default_limit = default_limit
        self.display_tz = display_tz
        self.task_repo = task_repo
        self.task_list_repo = task_list_repo

    async def record(
        self,
        entity_type: EntityType,
        entity_id: str,
        log_action: LogAction,
        entity_field: str = "",
        old_value: Optional[str] = None,
        new_value: Optional[str] = None,
    ) -> Optional[LogRecord]:
        """Append a change record.

        Runs after the change itself is committed, so a failure here is logged
        and reported as None instead of failing a change that already happened.
        """
        record = LogRecord(
            log_id=new_log_id(),
            entity_type=entity_type.value,
            entity_id=entity_id,
            entity_field=entity_field,
            log_action=log_action.value,
            log_date=datetime.now(timezone.utc),
            old_value=old_value,
            new_value=new_value,
        )
        try:
            await self.repo.add(record)
        except Exception:
            logger.exception(
                "log.record.failed",
                extra={
                    "category": "history",
                    "event": "log.record.failed",
                    "log_action": record.log_action,
                    "entity_type": record.entity_type,
                    "entity_id": entity_id,
                },
            )
            return None
        logger.debug(
            "log.record",
            extra={"category": "history", "event": "log.record", "log_action": record.log_action, "entity_id": entity_id},
        )
        return record

    async def list_logs(self, limit: Optional[int] = None) -> List[LogRecord]:
        limit = limit or self.default_limit
        async with persistence_guard(logger, "log.list.failed", category="history", limit=limit):
            return await self.repo.list(limit)

    async def history(self, limit: Optional[int] = None) -> List[HistoryItem]:
        """Formatted history, newest first, resolved against the current tasks and lists."""
        logs = await self.list_logs(limit)
        async with persistence_guard(logger, "log.lookup.failed", category="history"):
            lookup = CollectionLookup(await self.task_repo.query(), await self.task_list_repo.query())
        return [format_log(record, lookup, self.display_tz) for record in logs]

    async def clear(self) -> int:
        async with persistence_guard(logger, "log.clear.failed", category="history"):
            removed = await self.repo.clear()
        logger.info("log.clear", extra={"category": "history", "event": "log.clear", "removed": removed})
        return removed
