# seo_admin/services/task_repository.py
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
import logging

from sqlalchemy import select, func, and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from seo_admin.core.exceptions import StoreException
from seo_admin.models.task import Task, TaskLog

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = {
    "created_at": Task.created_at,
    "updated_at": Task.updated_at,
    "scheduled_at": Task.scheduled_at,
    "started_at": Task.started_at,
    "completed_at": Task.completed_at,
    "priority": Task.priority,
    "status": Task.status,
    "type": Task.type,
    "retry_count": Task.retry_count,
}


class TaskRepository:
    """Record store for tasks, bound to one session"""

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _where(filters: Dict[str, Any]) -> list:
        clauses = []
        if filters.get("type") is not None:
            clauses.append(Task.type == filters["type"])
        if filters.get("status") is not None:
            clauses.append(Task.status == filters["status"])
        if filters.get("priority") is not None:
            clauses.append(Task.priority == filters["priority"])
        return clauses

    async def _rollback_and_raise(self, operation: str, error: SQLAlchemyError):
        logger.error(f"Task store {operation} failed: {error}")
        await self.session.rollback()
        raise StoreException(str(error)) from error

    async def find_many(
            self,
            filters: Dict[str, Any],
            sort: str = "created_at",
            order: str = "desc",
            offset: int = 0,
            limit: int = 10,
    ) -> List[Tuple[Task, int]]:
        """Return (task, log count) rows for one page"""
        log_count = (
            select(func.count(TaskLog.id))
            .where(TaskLog.task_id == Task.id)
            .correlate(Task)
            .scalar_subquery()
        )
        column = SORTABLE_COLUMNS[sort]
        query = select(Task, log_count.label("log_count"))

        clauses = self._where(filters)
        if clauses:
            query = query.where(and_(*clauses))

        query = query.order_by(column.asc() if order == "asc" else column.desc(), Task.id)
        query = query.offset(offset).limit(limit)

        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            await self._rollback_and_raise("find_many", e)
        return [(row[0], row[1] or 0) for row in result.all()]

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        query = select(func.count(Task.id))
        clauses = self._where(filters or {})
        if clauses:
            query = query.where(and_(*clauses))
        try:
            total = await self.session.scalar(query)
        except SQLAlchemyError as e:
            await self._rollback_and_raise("count", e)
        return total or 0

    async def count_by(self, column_name: str) -> Dict[Any, int]:
        column = getattr(Task, column_name)
        try:
            result = await self.session.execute(
                select(column, func.count(Task.id)).group_by(column)
            )
        except SQLAlchemyError as e:
            await self._rollback_and_raise("count_by", e)
        return {key: count for key, count in result.all()}

    async def get(self, task_id: UUID, with_logs: bool = False) -> Optional[Task]:
        query = select(Task).where(Task.id == task_id)
        if with_logs:
            query = query.options(selectinload(Task.logs))
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            await self._rollback_and_raise("get", e)
        return result.scalar_one_or_none()

    async def create(self, data: Dict[str, Any]) -> Task:
        task = Task(**data)
        self.session.add(task)
        try:
            await self.session.commit()
            await self.session.refresh(task)
        except SQLAlchemyError as e:
            await self._rollback_and_raise("create", e)
        return task

    async def update(self, task: Task, changes: Dict[str, Any]) -> Task:
        for field, value in changes.items():
            setattr(task, field, value)
        try:
            await self.session.commit()
            await self.session.refresh(task)
        except SQLAlchemyError as e:
            await self._rollback_and_raise("update", e)
        return task

    async def delete(self, task: Task) -> None:
        try:
            await self.session.delete(task)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self._rollback_and_raise("delete", e)

