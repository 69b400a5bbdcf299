from __future__ import annotations
from datetime import date, datetime, timezone
from typing import Optional, List

from sqlalchemy import String, Text, Date, DateTime, ForeignKey, func, or_, select
from sqlalchemy.orm import Mapped, mapped_column

from taskmanager.domain.task_models import Task, TaskFilter, TaskPriority
from taskmanager.infra.db.sqlite import Base


def as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way in; everything we write is UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class TaskRow(Base):
    __tablename__ = "tasks"

    task_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    task_name: Mapped[str] = mapped_column(String(140), nullable=False)
    task_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    task_due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    task_priority: Mapped[str] = mapped_column(String(10), nullable=False)
    task_list_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("task_lists.task_list_id"), nullable=False, index=True
    )
    task_creation_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    @classmethod
    def from_domain(cls, task: Task) -> "TaskRow":
        return cls(
            task_id=task.task_id,
            task_name=task.task_name,
            task_description=task.task_description,
            task_due_date=task.task_due_date,
            task_priority=task.task_priority.value,
            task_list_id=task.task_list_id,
            task_creation_time=task.task_creation_time,
        )

    def to_domain(self) -> Task:
        return Task(
            task_id=self.task_id,
            task_name=self.task_name,
            task_description=self.task_description,
            task_due_date=self.task_due_date,
            task_priority=TaskPriority(self.task_priority),
            task_list_id=self.task_list_id,
            task_creation_time=as_utc(self.task_creation_time),
        )


class SQLiteTaskRepo:
    def __init__(self, sessionmaker):
        self.sessionmaker = sessionmaker

    async def find(self, task_id: str) -> Optional[Task]:
        async with self.sessionmaker() as session:
            row = await session.get(TaskRow, task_id)
            return row.to_domain() if row else None

    async def save(self, task: Task) -> Task:
        async with self.sessionmaker() as session:
            # merge = insert or update by primary key
            await session.merge(TaskRow.from_domain(task))
            await session.commit()
            return task

    async def remove(self, task: Task) -> Task:
        async with self.sessionmaker() as session:
            row = await session.get(TaskRow, task.task_id)
            if row is not None:
                await session.delete(row)
                await session.commit()
            return task

    async def query(self, filters: Optional[TaskFilter] = None) -> List[Task]:
        filters = filters or TaskFilter()
        stmt = select(TaskRow)

        if filters.task_priority:
            stmt = stmt.where(TaskRow.task_priority == filters.task_priority.value)
        if filters.search:
            # plain substring match: % and _ in the search text are literals
            needle = filters.search.lower()
            stmt = stmt.where(or_(
                func.lower(TaskRow.task_name, type_=String).contains(needle, autoescape=True),
                func.lower(TaskRow.task_description, type_=String).contains(needle, autoescape=True),
            ))
        if filters.task_creation_time:
            stmt = stmt.where(func.date(TaskRow.task_creation_time) == filters.task_creation_time.isoformat())
        if filters.task_list_id:
            stmt = stmt.where(TaskRow.task_list_id == filters.task_list_id)

        async with self.sessionmaker() as session:
            res = await session.execute(stmt.order_by(TaskRow.task_creation_time))
            return [r.to_domain() for r in res.scalars().all()]
