from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from dotenv import load_dotenv
load_dotenv()


class Settings(BaseSettings):
	# App
	APP_NAME: str = "Paper SEO Admin API"
	APP_VERSION: str = "1.0.0"
	API_V1_PREFIX: str = "/api/v1"
	DEBUG: bool = False
	ENVIRONMENT: str = "development" # development, staging, production
	LOG_LEVEL: str = "INFO"

	# Server
	PORT: int = 8000
	WORKERS: int = 4

	# Database
	DATABASE_URL: str = "sqlite+aiosqlite:///./paper_seo.db"
	DB_POOL_SIZE: int = 20
	DB_MAX_OVERFLOW: int = 40
	DB_POOL_PRE_PING: bool = True
	DB_ECHO: bool = False
	AUTO_CREATE_TABLES: bool = False

	# Pagination
	DEFAULT_PAGE_SIZE: int = 10
	MAX_PAGE_SIZE: int = 100

	# CORS
	CORS_ORIGINS: List[str] = ["http://localhost:3000"]
	CORS_ALLOW_CREDENTIALS: bool = True

	# Security
	ALLOWED_HOSTS: List[str] = ["*"]

	# Monitoring
	EXPOSE_METRICS: bool = True
	SLOW_REQUEST_SECONDS: float = 1.0

	model_config = SettingsConfigDict(
		env_file=".env",
		env_file_encoding="utf-8",
		case_sensitive=True,
		extra="ignore",
	)

	@property
	def async_database_url(self) -> str:
		"""DATABASE_URL with an async driver for postgres URLs"""
		url = self.DATABASE_URL
		if url.startswith("postgres://"):
			url = url.replace("postgres://", "postgresql://", 1)
		if url.startswith("postgresql://"):
			url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
		return url


@lru_cache()
def get_settings() -> Settings:
	return Settings()


settings = get_settings()
