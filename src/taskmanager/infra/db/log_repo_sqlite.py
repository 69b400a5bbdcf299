from __future__ import annotations
from datetime import datetime
from typing import Optional, List

from sqlalchemy import String, Text, DateTime, delete, literal_column, select
from sqlalchemy.orm import Mapped, mapped_column

from taskmanager.domain.log_models import LogRecord
from taskmanager.infra.db.sqlite import Base
from taskmanager.infra.db.task_repo_sqlite import as_utc


class LogRow(Base):
    __tablename__ = "logs"

    # no FK to tasks/task_lists: records outlive the entities they describe
    log_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    entity_type: Mapped[str] = mapped_column(String(20), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    entity_field: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    log_action: Mapped[str] = mapped_column(String(20), nullable=False)
    log_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    old_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    new_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def to_domain(self) -> LogRecord:
        return LogRecord(
            log_id=self.log_id,
            entity_type=self.entity_type,
            entity_id=self.entity_id,
            entity_field=self.entity_field,
            log_action=self.log_action,
            log_date=as_utc(self.log_date),
            old_value=self.old_value,
            new_value=self.new_value,
        )


class SQLiteLogRepo:
    def __init__(self, sessionmaker):
        self.sessionmaker = sessionmaker

    async def add(self, record: LogRecord) -> LogRecord:
        async with self.sessionmaker() as session:
            session.add(LogRow(**record.model_dump()))
            await session.commit()
            return record

    async def list(self, limit: Optional[int] = None) -> List[LogRecord]:
        # rowid breaks ties between records written within the same microsecond
        stmt = select(LogRow).order_by(LogRow.log_date.desc(), literal_column("rowid").desc())
        if limit:
            stmt = stmt.limit(limit)
        async with self.sessionmaker() as session:
            res = await session.execute(stmt)
            return [r.to_domain() for r in res.scalars().all()]

    async def clear(self) -> int:
        async with self.sessionmaker() as session:
            res = await session.execute(delete(LogRow))
            await session.commit()
            return res.rowcount or 0
