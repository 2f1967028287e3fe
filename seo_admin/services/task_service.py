# seo_admin/services/task_service.py

import logging
import re
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from seo_admin.core.exceptions import BadRequestException, InvalidIdentifierException, NotFoundException
from seo_admin.models.task import Task, TaskStatus, TaskType
from seo_admin.monitoring.metrics import task_operations
from seo_admin.schemas.base import PaginationInfo
from seo_admin.schemas.task import (
	TaskCreate,
	TaskUpdate,
	TaskResponse,
	TaskListItem,
	TaskDetailResponse,
	TaskStatsResponse,
)
from seo_admin.services.task_repository import TaskRepository, SORTABLE_COLUMNS

logger = logging.getLogger(__name__)

# RFC 4122 layout, versions 1-5
UUID_PATTERN = re.compile(
	r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
	re.IGNORECASE,
)

_CAMEL = re.compile(r"(?<!^)(?=[A-Z])")


def parse_task_id(raw: str) -> UUID:
	"""Validate an id path segment before it reaches the store"""
	if not UUID_PATTERN.match(raw or ""):
		raise InvalidIdentifierException("Invalid task ID format", error="id")
	return UUID(raw)


def normalize_sort(sort: Optional[str]) -> str:
	if not sort:
		return "created_at"
	column = _CAMEL.sub("_", sort).lower()
	if column not in SORTABLE_COLUMNS:
		raise BadRequestException(
			f"Invalid sort field. Must be one of: {', '.join(SORTABLE_COLUMNS)}",
			error="sort",
		)
	return column


class TaskService:
	"""Validation and shaping of task records on top of the record store"""

	def __init__(self, repository: TaskRepository):
		self.repository = repository

	async def list_tasks(
			self,
			page: int = 1,
			limit: int = 10,
			type: Optional[TaskType] = None,
			status: Optional[TaskStatus] = None,
			priority: Optional[int] = None,
			sort: Optional[str] = None,
			order: str = "desc",
	) -> Tuple[List[TaskListItem], PaginationInfo]:
		column = normalize_sort(sort)
		filters: Dict[str, Any] = {"type": type, "status": status, "priority": priority}

		total = await self.repository.count(filters)
		rows = await self.repository.find_many(
			filters,
			sort=column,
			order=order,
			offset=(page - 1) * limit,
			limit=limit,
		)

		items = [
			TaskListItem(**TaskResponse.model_validate(task).model_dump(), log_count=log_count)
			for task, log_count in rows
		]
		return items, PaginationInfo.build(page, limit, total)

	async def get_task(self, task_id: UUID) -> TaskDetailResponse:
		task = await self.repository.get(task_id, with_logs=True)
		if not task:
			raise NotFoundException("Task not found")
		return TaskDetailResponse.model_validate(task)

	async def create_task(self, task_data: TaskCreate) -> TaskResponse:
		data = task_data.model_dump()
		# Lifecycle fields are never taken from the caller
		data["status"] = TaskStatus.PENDING
		data["retry_count"] = 0

		task = await self.repository.create(data)
		task_operations.labels(operation="create").inc()

		logger.info(f"Task created: {task.id} ({task.type.value}, priority {task.priority})")
		return TaskResponse.model_validate(task)

	async def update_task(self, task_id: UUID, task_update: TaskUpdate) -> TaskResponse:
		task = await self._get_or_404(task_id)

		changes = task_update.model_dump(exclude_unset=True)
		if changes:
			task = await self.repository.update(task, changes)
			task_operations.labels(operation="update").inc()
			logger.info(f"Task updated: {task.id} fields={sorted(changes)}")
		return TaskResponse.model_validate(task)

	async def delete_task(self, task_id: UUID) -> None:
		task = await self._get_or_404(task_id)

		await self.repository.delete(task)
		task_operations.labels(operation="delete").inc()

		logger.info(f"Task deleted: {task_id}")

	async def get_stats(self) -> TaskStatsResponse:
		by_status = {status: 0 for status in TaskStatus}
		by_status.update(await self.repository.count_by("status"))
		by_type = {task_type: 0 for task_type in TaskType}
		by_type.update(await self.repository.count_by("type"))

		return TaskStatsResponse(
			total=sum(by_status.values()),
			by_status=by_status,
			by_type=by_type,
			pending_tasks=by_status[TaskStatus.PENDING],
			failed_tasks=by_status[TaskStatus.FAILED],
		)

	async def _get_or_404(self, task_id: UUID) -> Task:
		task = await self.repository.get(task_id)
		if not task:
			raise NotFoundException("Task not found")
		return task
