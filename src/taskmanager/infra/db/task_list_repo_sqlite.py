from __future__ import annotations
from datetime import datetime
from typing import Optional, List

from sqlalchemy import String, DateTime, delete, select
from sqlalchemy.orm import Mapped, mapped_column

from taskmanager.domain.task_list_models import TaskList
from taskmanager.infra.db.sqlite import Base
from taskmanager.infra.db.task_repo_sqlite import TaskRow, as_utc


class TaskListRow(Base):
    __tablename__ = "task_lists"

    task_list_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    task_list_name: Mapped[str] = mapped_column(String(140), nullable=False)
    task_list_creation_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def to_domain(self) -> TaskList:
        return TaskList(
            task_list_id=self.task_list_id,
            task_list_name=self.task_list_name,
            task_list_creation_time=as_utc(self.task_list_creation_time),
        )


class SQLiteTaskListRepo:
    def __init__(self, sessionmaker):
        self.sessionmaker = sessionmaker

    async def find(self, task_list_id: str) -> Optional[TaskList]:
        async with self.sessionmaker() as session:
            row = await session.get(TaskListRow, task_list_id)
            return row.to_domain() if row else None

    async def save(self, task_list: TaskList) -> TaskList:
        async with self.sessionmaker() as session:
            await session.merge(TaskListRow(
                task_list_id=task_list.task_list_id,
                task_list_name=task_list.task_list_name,
                task_list_creation_time=task_list.task_list_creation_time,
            ))
            await session.commit()
            return task_list

    async def remove(self, task_list: TaskList) -> TaskList:
        # the list and its tasks go in one commit, or not at all
        async with self.sessionmaker() as session:
            await session.execute(delete(TaskRow).where(TaskRow.task_list_id == task_list.task_list_id))
            await session.execute(delete(TaskListRow).where(TaskListRow.task_list_id == task_list.task_list_id))
            await session.commit()
            return task_list

    async def query(self) -> List[TaskList]:
        async with self.sessionmaker() as session:
            res = await session.execute(select(TaskListRow).order_by(TaskListRow.task_list_creation_time))
            return [r.to_domain() for r in res.scalars().all()]
