# =====================================
# seo_admin/api/v1/tasks.py
# =====================================
from fastapi import APIRouter, Depends, Query, status
from typing import List, Literal, Optional
from uuid import UUID

from seo_admin.api.dependencies import get_task_service, valid_task_id
from seo_admin.config import settings
from seo_admin.models.task import TaskStatus, TaskType
from seo_admin.schemas.base import ApiResponse
from seo_admin.schemas.task import (
	TaskCreate,
	TaskUpdate,
	TaskResponse,
	TaskListItem,
	TaskDetailResponse,
	TaskStatsResponse,
)
from seo_admin.services.task_service import TaskService

router = APIRouter()


@router.get("", response_model=ApiResponse[List[TaskListItem]])
async def list_tasks(
		page: int = Query(1, ge=1),
		limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
		type: Optional[TaskType] = None,
		status: Optional[TaskStatus] = None,
		priority: Optional[int] = None,
		sort: Optional[str] = None,
		order: Literal["asc", "desc"] = "desc",
		service: TaskService = Depends(get_task_service),
):
	"""List tasks with filters, sorting and pagination"""
	tasks, pagination = await service.list_tasks(
		page=page,
		limit=limit,
		type=type,
		status=status,
		priority=priority,
		sort=sort,
		order=order,
	)
	return ApiResponse(data=tasks, message="Tasks retrieved successfully", pagination=pagination)


@router.post("", response_model=ApiResponse[TaskResponse], status_code=status.HTTP_201_CREATED)
async def create_task(
		task_data: TaskCreate,
		service: TaskService = Depends(get_task_service),
):
	"""Create a new task record in PENDING state"""
	task = await service.create_task(task_data)
	return ApiResponse(data=task, message="Task created successfully")


@router.get("/stats", response_model=ApiResponse[TaskStatsResponse])
async def get_task_stats(service: TaskService = Depends(get_task_service)):
	"""Task counts per status and per type"""
	stats = await service.get_stats()
	return ApiResponse(data=stats, message="Task statistics retrieved successfully")


@router.get("/{task_id}", response_model=ApiResponse[TaskDetailResponse])
async def get_task(
		task_id: UUID = Depends(valid_task_id),
		service: TaskService = Depends(get_task_service),
):
	"""Get a task with its logs, newest first"""
	task = await service.get_task(task_id)
	return ApiResponse(data=task, message="Task retrieved successfully")


@router.api_route("/{task_id}", methods=["PUT", "PATCH"], response_model=ApiResponse[TaskResponse])
async def update_task(
		task_update: TaskUpdate,
		task_id: UUID = Depends(valid_task_id),
		service: TaskService = Depends(get_task_service),
):
	"""Partially update a task; absent fields keep their stored value"""
	task = await service.update_task(task_id, task_update)
	return ApiResponse(data=task, message="Task updated successfully")


@router.delete("/{task_id}", response_model=ApiResponse[None])
async def delete_task(
		task_id: UUID = Depends(valid_task_id),
		service: TaskService = Depends(get_task_service),
):
	"""Hard delete a task and its logs"""
	await service.delete_task(task_id)
	return ApiResponse(data=None, message="Task deleted successfully")
