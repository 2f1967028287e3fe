import pytest
from pydantic import ValidationError

from seo_admin.core.exceptions import describe_validation_errors
from seo_admin.models.task import TaskStatus, TaskType
from seo_admin.schemas.task import TaskCreate, TaskUpdate
from seo_admin.services.task_service import normalize_sort, parse_task_id
from seo_admin.core.exceptions import BadRequestException, InvalidIdentifierException


def describe(model, body):
	with pytest.raises(ValidationError) as exc_info:
		model.model_validate(body)
	return describe_validation_errors(exc_info.value.errors())


def test_create_defaults():
	task = TaskCreate.model_validate({"type": "CRAWL", "payload": {"url": "https://example.com"}})
	assert task.type is TaskType.CRAWL
	assert task.priority == 5
	assert task.max_retries == 3
	assert task.scheduled_at is None


def test_create_null_priority_uses_default():
	task = TaskCreate.model_validate({"type": "CRAWL", "payload": {}, "priority": None, "maxRetries": None})
	assert task.priority == 5
	assert task.max_retries == 3


def test_create_accepts_camel_case_aliases():
	task = TaskCreate.model_validate({
		"type": "INDEX_PAGE",
		"payload": {"page": "/papers/1"},
		"maxRetries": 0,
		"scheduledAt": "2024-05-01T12:00:00Z",
	})
	assert task.max_retries == 0
	assert task.scheduled_at.year == 2024


def test_missing_fields_take_precedence():
	described = describe(TaskCreate, {"priority": 99})
	assert described == {"message": "type and payload are required", "error": "type and payload"}


def test_invalid_type_lists_choices():
	described = describe(TaskCreate, {"type": "SCRAPE", "payload": {}})
	assert described["error"] == "type"
	assert described["message"] == "Invalid task type. Must be one of: CRAWL, PARSE_PDF, GENERATE_ABSTRACT, INDEX_PAGE"


def test_several_invalid_fields_named_together():
	described = describe(TaskCreate, {"type": "SCRAPE", "payload": [1, 2], "priority": 11})
	assert described["error"] == "type, payload, priority"
	assert "priority must be between 1 and 10" in described["message"]


def test_max_retries_field_name_is_snake_case():
	described = describe(TaskCreate, {"type": "CRAWL", "payload": {}, "maxRetries": -2})
	assert described["error"] == "max_retries"
	assert described["message"] == "max retries must be zero or greater"


def test_update_tracks_only_present_fields():
	update = TaskUpdate.model_validate({"status": "RUNNING", "error": None})
	assert update.model_dump(exclude_unset=True) == {"status": TaskStatus.RUNNING, "error_message": None}


def test_update_rejects_null_for_required_columns():
	described = describe(TaskUpdate, {"priority": None})
	assert described == {"message": "priority cannot be null", "error": "priority"}


def test_update_invalid_status():
	described = describe(TaskUpdate, {"status": "DONE"})
	assert described["error"] == "status"
	assert "PENDING, RUNNING, COMPLETED, FAILED, CANCELLED" in described["message"]


@pytest.mark.parametrize("raw", [
	"0f8fad5b-d9cb-469f-a165-70867728950e",
	"0F8FAD5B-D9CB-169F-A165-70867728950E",
])
def test_parse_task_id_accepts_rfc4122(raw):
	assert str(parse_task_id(raw)) == raw.lower()


@pytest.mark.parametrize("raw", [
	"not-a-uuid",
	"00000000-0000-0000-0000-000000000000",
	"0f8fad5b-d9cb-469f-c165-70867728950e",
	"0f8fad5bd9cb469fa16570867728950e",
])
def test_parse_task_id_rejects_malformed(raw):
	with pytest.raises(InvalidIdentifierException):
		parse_task_id(raw)


def test_normalize_sort():
	assert normalize_sort(None) == "created_at"
	assert normalize_sort("completedAt") == "completed_at"
	assert normalize_sort("retry_count") == "retry_count"
	with pytest.raises(BadRequestException):
		normalize_sort("payload")


def test_null_required_fields_count_as_missing():
	described = describe(TaskCreate, {"type": None, "payload": None, "priority": 3})
	assert described == {"message": "type and payload are required", "error": "type and payload"}


def test_priority_must_be_a_real_integer():
	for body in ({"priority": True}, {"priority": "7"}):
		described = describe(TaskCreate, {"type": "CRAWL", "payload": {}, **body})
		assert described["error"] == "priority"
	described = describe(TaskUpdate, {"priority": False})
	assert described["error"] == "priority"
