from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request
import uuid
import contextvars
import logging

# Context variable to store request ID
request_id_context = contextvars.ContextVar("request_id", default=None)

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
	"""Reuse the caller's X-Request-ID or generate one, and echo it back"""

	async def dispatch(self, request: Request, call_next):
		request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

		request.state.request_id = request_id
		token = request_id_context.set(request_id)

		logger.debug(f"Request started: {request.method} {request.url.path} [{request_id}]")
		try:
			response = await call_next(request)
		finally:
			request_id_context.reset(token)

		response.headers[REQUEST_ID_HEADER] = request_id
		response.headers["X-Correlation-ID"] = request_id

		logger.debug(f"Request completed: {request.method} {request.url.path} [{request_id}] - {response.status_code}")

		return response


def get_request_id() -> str:
	"""Get current request ID from context"""
	return request_id_context.get() or "unknown"


class RequestIDLogFilter(logging.Filter):
	"""Expose the current request ID to log formatters as %(request_id)s"""

	def filter(self, record: logging.LogRecord) -> bool:
		record.request_id = get_request_id()
		return True
