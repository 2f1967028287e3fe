import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from starlette.middleware.gzip import GZipMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware

from seo_admin.config import settings
from seo_admin.api.v1 import tasks
from seo_admin.core.exceptions import register_exception_handlers
from seo_admin.core.logging import configure_logging
from seo_admin.database import Database, get_database
from seo_admin.middleware.logging import LoggingMiddleware
from seo_admin.middleware.monitoring import MonitoringMiddleware
from seo_admin.middleware.request_id import RequestIDMiddleware
from seo_admin.middleware.security import SecurityHeadersMiddleware
from seo_admin.monitoring import metrics
from seo_admin.services.health_service import get_detailed_health

configure_logging(settings)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database = Database.from_settings(settings)
    app.state.database = database
    if settings.AUTO_CREATE_TABLES:
        await database.create_all()
    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} started ({settings.ENVIRONMENT})")

    yield

    await database.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="""
    **Paper SEO Admin API** - record keeping for the paper SEO task pipeline

    ## Features
		* Task records for crawling, PDF parsing, abstract generation and page indexing
		* Filtering, sorting and pagination
		* Uniform `{success, data, message, error, pagination}` envelope

    ## Documentation
		* [Interactive API Docs](/docs)
		* [Health Check](/health)
    """,
    version=settings.APP_VERSION,
    openapi_tags=[
        {"name": "tasks", "description": "Task record management"},
        {"name": "monitoring", "description": "System monitoring"},
    ],
    docs_url="/docs",
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

register_exception_handlers(app)


# =====================================
# Process Time Middleware
# =====================================
@app.middleware("http")
async def add_process_time(request: Request, call_next):
    """Add request processing time to response headers"""
    import time

    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time

    response.headers["X-Process-Time"] = f"{process_time:.3f}s"

    return response


# =====================================
# Configure Middleware Stack
# =====================================

# GZIP Compression (minimum 1KB)
app.add_middleware(GZipMiddleware, minimum_size=1000)

# Trusted Host validation (production only)
if not settings.DEBUG:
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=settings.ALLOWED_HOSTS
    )

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=[
        "X-Request-ID",
        "X-Process-Time",
    ],
    max_age=3600,
)

# Custom middleware
app.add_middleware(MonitoringMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestIDMiddleware)

# Include routers
app.include_router(tasks.router, prefix=f"{settings.API_V1_PREFIX}/tasks", tags=["tasks"])

# Monitoring endpoints (internal use)
if settings.EXPOSE_METRICS:
    app.include_router(
        metrics.router,
        prefix="/internal",
        tags=["monitoring"]
    )


@app.get("/health", tags=["monitoring"])
async def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.APP_VERSION
    }


@app.get("/health/detailed", tags=["monitoring"])
async def detailed_health_check(request: Request):
    return await get_detailed_health(get_database(request))
