import logging
from typing import Any, AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import NullPool, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from seo_admin.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Owns the async engine and session factory for one application instance"""

    def __init__(self, url: str, echo: bool = False, **engine_kwargs: Any):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        url = settings.async_database_url
        if url.startswith("sqlite") or settings.DEBUG:
            # No pool in debug mode or on SQLite
            return cls(url, echo=settings.DB_ECHO, poolclass=NullPool)
        return cls(
            url,
            echo=settings.DB_ECHO,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_pre_ping=settings.DB_POOL_PRE_PING,
        )

    async def create_all(self) -> None:
        """Create tables if they do not exist"""
        from seo_admin.models import task  # noqa: F401 - registers the models

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database schema initialized successfully")
        except Exception as e:
            logger.error(f"Database initialization failed: {e}")
            raise

    async def check_connection(self) -> bool:
        """Check if database is healthy"""
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database connections closed")


def get_database(request: Request) -> Optional[Database]:
    return getattr(request.app.state, "database", None)


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, Any]:
    database = get_database(request)
    if database is None:
        raise RuntimeError("Database is not initialized")

    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
