# =====================================
# seo_admin/schemas/task.py
# =====================================
from enum import Enum
from pydantic import BaseModel, Field, StrictInt, ConfigDict, AliasChoices, field_validator, ValidationInfo
from pydantic_core import PydanticCustomError
from typing import Optional, Dict, Any, List, Type
from datetime import datetime
from uuid import UUID

from seo_admin.models.task import (
	TaskType,
	TaskStatus,
	DEFAULT_PRIORITY,
	DEFAULT_MAX_RETRIES,
	MIN_PRIORITY,
	MAX_PRIORITY,
)


def _choices(enum_cls: Type[Enum]) -> str:
	return ", ".join(member.value for member in enum_cls)


def parse_enum(value: Any, enum_cls: Type[Enum], label: str):
	if isinstance(value, enum_cls):
		return value
	try:
		return enum_cls(value)
	except (ValueError, TypeError):
		raise ValueError(f"Invalid {label}. Must be one of: {_choices(enum_cls)}")


def check_priority(value: int) -> int:
	if value < MIN_PRIORITY or value > MAX_PRIORITY:
		raise ValueError(f"priority must be between {MIN_PRIORITY} and {MAX_PRIORITY}")
	return value


def _not_null(value: Any, info: ValidationInfo) -> Any:
	if value is None:
		raise ValueError(f"{info.field_name} cannot be null")
	return value


def check_payload(value: Any) -> Any:
	if not isinstance(value, dict):
		raise ValueError("payload must be a valid JSON object")
	return value


def _required(value: Any) -> Any:
	# null and "" count as absent
	if value is None or value == "":
		raise PydanticCustomError("missing", "Field required")
	return value


class TaskCreate(BaseModel):
	type: TaskType
	payload: Dict[str, Any]
	priority: StrictInt = DEFAULT_PRIORITY
	max_retries: StrictInt = Field(
		DEFAULT_MAX_RETRIES,
		validation_alias=AliasChoices("max_retries", "maxRetries"),
	)
	scheduled_at: Optional[datetime] = Field(
		None,
		validation_alias=AliasChoices("scheduled_at", "scheduledAt"),
	)

	model_config = ConfigDict(populate_by_name=True)

	@field_validator("type", mode="before")
	@classmethod
	def validate_type(cls, v):
		return parse_enum(_required(v), TaskType, "task type")

	@field_validator("payload", mode="before")
	@classmethod
	def validate_payload(cls, v):
		return check_payload(_required(v))

	@field_validator("priority", mode="before")
	@classmethod
	def default_priority(cls, v):
		return DEFAULT_PRIORITY if v is None else v

	@field_validator("priority")
	@classmethod
	def validate_priority(cls, v):
		return check_priority(v)

	@field_validator("max_retries", mode="before")
	@classmethod
	def default_max_retries(cls, v):
		return DEFAULT_MAX_RETRIES if v is None else v

	@field_validator("max_retries")
	@classmethod
	def validate_max_retries(cls, v):
		if v < 0:
			raise ValueError("max retries must be zero or greater")
		return v


class TaskUpdate(BaseModel):
	"""Partial update; only the fields present in the body are written"""
	type: Optional[TaskType] = None
	status: Optional[TaskStatus] = None
	priority: Optional[StrictInt] = None
	payload: Optional[Dict[str, Any]] = None
	result: Optional[Dict[str, Any]] = None
	error_message: Optional[str] = Field(
		None,
		validation_alias=AliasChoices("error", "error_message", "errorMessage"),
	)
	started_at: Optional[datetime] = Field(
		None,
		validation_alias=AliasChoices("started_at", "startedAt"),
	)
	completed_at: Optional[datetime] = Field(
		None,
		validation_alias=AliasChoices("completed_at", "completedAt"),
	)

	model_config = ConfigDict(populate_by_name=True)

	@field_validator("type", mode="before")
	@classmethod
	def validate_type(cls, v, info: ValidationInfo):
		return parse_enum(_not_null(v, info), TaskType, "task type")

	@field_validator("status", mode="before")
	@classmethod
	def validate_status(cls, v, info: ValidationInfo):
		return parse_enum(_not_null(v, info), TaskStatus, "status")

	@field_validator("payload", mode="before")
	@classmethod
	def validate_payload(cls, v, info: ValidationInfo):
		return check_payload(_not_null(v, info))

	@field_validator("priority", mode="before")
	@classmethod
	def priority_not_null(cls, v, info: ValidationInfo):
		return _not_null(v, info)

	@field_validator("priority")
	@classmethod
	def validate_priority(cls, v):
		return check_priority(v)


class TaskLogResponse(BaseModel):
	id: UUID
	level: str
	message: str
	data: Optional[Any] = None
	created_at: datetime

	model_config = ConfigDict(from_attributes=True)


class TaskResponse(BaseModel):
	id: UUID
	type: TaskType
	status: TaskStatus
	priority: int
	payload: Dict[str, Any]
	result: Optional[Dict[str, Any]] = None
	error_message: Optional[str] = None
	retry_count: int
	max_retries: int
	scheduled_at: Optional[datetime] = None
	started_at: Optional[datetime] = None
	completed_at: Optional[datetime] = None
	created_at: datetime
	updated_at: datetime

	model_config = ConfigDict(from_attributes=True)


class TaskListItem(TaskResponse):
	log_count: int = 0


class TaskDetailResponse(TaskResponse):
	logs: List[TaskLogResponse] = []


class TaskStatsResponse(BaseModel):
	total: int
	by_status: Dict[TaskStatus, int]
	by_type: Dict[TaskType, int]
	pending_tasks: int
	failed_tasks: int
