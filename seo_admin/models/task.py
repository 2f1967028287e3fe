# =====================================
# seo_admin/models/task.py
# =====================================
from sqlalchemy import Column, String, Integer, DateTime, JSON, Text, Enum as SQLEnum, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship
from seo_admin.database import Base
from seo_admin.models.base import BaseModel
import enum


class TaskType(str, enum.Enum):
	CRAWL = "CRAWL"
	PARSE_PDF = "PARSE_PDF"
	GENERATE_ABSTRACT = "GENERATE_ABSTRACT"
	INDEX_PAGE = "INDEX_PAGE"


class TaskStatus(str, enum.Enum):
	PENDING = "PENDING"
	RUNNING = "RUNNING"
	COMPLETED = "COMPLETED"
	FAILED = "FAILED"
	CANCELLED = "CANCELLED"


DEFAULT_PRIORITY = 5
MIN_PRIORITY = 1
MAX_PRIORITY = 10
DEFAULT_MAX_RETRIES = 3


class Task(Base, BaseModel):
	__tablename__ = "tasks"

	type = Column(SQLEnum(TaskType, name="task_type"), nullable=False, index=True)
	status = Column(SQLEnum(TaskStatus, name="task_status"), nullable=False, default=TaskStatus.PENDING, index=True)
	priority = Column(Integer, nullable=False, default=DEFAULT_PRIORITY)
	payload = Column(JSON, nullable=False)
	result = Column(JSON)
	error_message = Column(Text)
	retry_count = Column(Integer, nullable=False, default=0)
	max_retries = Column(Integer, nullable=False, default=DEFAULT_MAX_RETRIES)
	scheduled_at = Column(DateTime(timezone=True))
	started_at = Column(DateTime(timezone=True))
	completed_at = Column(DateTime(timezone=True))

	logs = relationship(
		"TaskLog",
		back_populates="task",
		cascade="all, delete-orphan",
		order_by=lambda: TaskLog.created_at.desc(),
	)

	__table_args__ = (
		Index("idx_task_type_status", "type", "status"),
	)


class TaskLog(Base, BaseModel):
	__tablename__ = "task_logs"

	task_id = Column(Uuid(as_uuid=True), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
	level = Column(String(20), nullable=False, default="INFO")
	message = Column(Text, nullable=False)
	data = Column(JSON)

	task = relationship("Task", back_populates="logs")
