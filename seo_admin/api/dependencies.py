from uuid import UUID

from fastapi import Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from seo_admin.database import get_session
from seo_admin.services.task_repository import TaskRepository
from seo_admin.services.task_service import TaskService, parse_task_id


def get_task_repository(session: AsyncSession = Depends(get_session)) -> TaskRepository:
	return TaskRepository(session)


def get_task_service(repository: TaskRepository = Depends(get_task_repository)) -> TaskService:
	return TaskService(repository)


def valid_task_id(task_id: str = Path(..., description="Task UUID")) -> UUID:
	"""Reject malformed ids with a 400 before the store is touched"""
	return parse_task_id(task_id)
