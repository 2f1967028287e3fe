import uuid
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from seo_admin.core.exceptions import StoreException
from seo_admin.models.task import TaskStatus, TaskType
from seo_admin.services.task_repository import TaskRepository


@pytest.fixture
def repository(database) -> TaskRepository:
	return TaskRepository(database.session_factory())


@pytest.mark.asyncio
async def test_store_errors_are_wrapped():
	session = AsyncMock(spec=AsyncSession)
	session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))

	with pytest.raises(StoreException) as exc_info:
		await TaskRepository(session).get(uuid.uuid4())

	assert "connection refused" in exc_info.value.detail
	assert exc_info.value.status_code == 500
	session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_and_count(repository: TaskRepository):
	await repository.create({"type": TaskType.CRAWL, "payload": {"url": "a"}, "status": TaskStatus.PENDING})
	await repository.create({"type": TaskType.PARSE_PDF, "payload": {"url": "b"}, "status": TaskStatus.PENDING})

	assert await repository.count() == 2
	assert await repository.count({"type": TaskType.PARSE_PDF}) == 1
	assert await repository.count({"priority": 6}) == 0
	await repository.session.close()


@pytest.mark.asyncio
async def test_count_by_status(repository: TaskRepository):
	await repository.create({"type": TaskType.CRAWL, "payload": {}, "status": TaskStatus.FAILED})
	await repository.create({"type": TaskType.CRAWL, "payload": {}, "status": TaskStatus.FAILED})

	counts = await repository.count_by("status")
	assert counts == {TaskStatus.FAILED: 2}
	await repository.session.close()


@pytest.mark.asyncio
async def test_update_then_get(repository: TaskRepository):
	task = await repository.create({"type": TaskType.CRAWL, "payload": {"url": "a"}, "status": TaskStatus.PENDING})

	await repository.update(task, {"status": TaskStatus.RUNNING})
	fetched = await repository.get(task.id)

	assert fetched.status == TaskStatus.RUNNING
	assert fetched.payload == {"url": "a"}
	await repository.session.close()
