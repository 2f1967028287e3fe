import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["AUTO_CREATE_TABLES"] = "false"

import uuid
from datetime import datetime, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from seo_admin.api.dependencies import get_task_repository
from seo_admin.database import Database
from seo_admin.main import app
from seo_admin.models.task import Task, TaskLog, TaskStatus, TaskType
from seo_admin.services.task_repository import TaskRepository


@pytest.fixture
async def database() -> AsyncGenerator[Database, None]:
	"""Fresh in-memory database per test"""
	database = Database(
		"sqlite+aiosqlite://",
		poolclass=StaticPool,
		connect_args={"check_same_thread": False},
	)
	await database.create_all()
	app.state.database = database

	yield database

	app.state.database = None
	await database.dispose()


@pytest.fixture
async def client(database: Database) -> AsyncGenerator[AsyncClient, None]:
	"""Create a test client"""
	async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
		yield client


@pytest.fixture
def make_task(database: Database):
	"""Insert a task (and optional logs) directly into the store"""

	async def _make_task(logs=(), **overrides) -> Task:
		values = {
			"type": TaskType.CRAWL,
			"status": TaskStatus.PENDING,
			"priority": 5,
			"payload": {"url": "https://example.com"},
		}
		values.update(overrides)
		task = Task(**values)
		async with database.session_factory() as session:
			session.add(task)
			await session.flush()
			for log in logs:
				session.add(TaskLog(task_id=task.id, **log))
			await session.commit()
			await session.refresh(task)
		return task

	return _make_task


def build_task(**overrides) -> Task:
	"""Detached task with every column populated"""
	now = datetime(2024, 1, 1, tzinfo=timezone.utc)
	values = {
		"id": uuid.uuid4(),
		"type": TaskType.CRAWL,
		"status": TaskStatus.PENDING,
		"priority": 5,
		"payload": {"url": "https://example.com"},
		"result": None,
		"error_message": None,
		"retry_count": 0,
		"max_retries": 3,
		"scheduled_at": None,
		"started_at": None,
		"completed_at": None,
		"created_at": now,
		"updated_at": now,
	}
	values.update(overrides)
	return Task(**values)


@pytest.fixture
def mock_repository() -> MagicMock:
	repository = MagicMock(spec=TaskRepository)
	repository.find_many = AsyncMock(return_value=[])
	repository.count = AsyncMock(return_value=0)
	repository.count_by = AsyncMock(return_value={})
	repository.get = AsyncMock(return_value=None)
	repository.create = AsyncMock()
	repository.update = AsyncMock()
	repository.delete = AsyncMock()
	return repository


@pytest.fixture
async def mocked_client(mock_repository: MagicMock) -> AsyncGenerator[AsyncClient, None]:
	"""Client whose record store is a mock; no database behind it"""
	app.dependency_overrides[get_task_repository] = lambda: mock_repository

	async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
		yield client

	app.dependency_overrides.clear()


@pytest.fixture
def task_factory():
	return build_task
