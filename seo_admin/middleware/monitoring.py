import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from seo_admin.config import settings
from seo_admin.monitoring.metrics import request_count, request_duration, active_requests
import time

logger = logging.getLogger(__name__)

METRICS_PATH = "/internal/metrics"


def endpoint_label(request: Request) -> str:
	"""Route template (e.g. /api/v1/tasks/{task_id}) instead of the raw path"""
	route = request.scope.get("route")
	return getattr(route, "path", None) or request.url.path


class MonitoringMiddleware(BaseHTTPMiddleware):
	"""Track request metrics for Prometheus"""

	async def dispatch(self, request: Request, call_next):
		# Skip metrics endpoint to avoid recursion
		if request.url.path == METRICS_PATH:
			return await call_next(request)

		active_requests.inc()
		start_time = time.time()

		try:
			response = await call_next(request)

			duration = time.time() - start_time
			endpoint = endpoint_label(request)

			request_count.labels(
				method=request.method,
				endpoint=endpoint,
				status=response.status_code
			).inc()

			request_duration.labels(
				method=request.method,
				endpoint=endpoint
			).observe(duration)

			if duration > settings.SLOW_REQUEST_SECONDS:
				logger.warning(
					f"Slow request: {request.method} {request.url.path} "
					f"took {duration:.2f}s"
				)

			return response

		finally:
			active_requests.dec()
