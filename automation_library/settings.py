"""
Application settings using Pydantic BaseSettings.
All configuration via environment variables.
"""

from functools import lru_cache
from typing import Literal
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = "Student Automation Library"
    app_version: str = "0.3.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = Field(default=8000, alias="PORT")

    # Storage backend: 'memory' keeps seeded records in-process, 'database' uses DATABASE_URL
    store_backend: Literal["memory", "database"] = "memory"
    mock_latency_ms: int = 100  # Simulated latency for the memory store
    seed_demo_data: bool = True

    # Database (only required when store_backend == "database")
    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    database_pool_size: int = 5
    database_max_overflow: int = 10

    @field_validator("database_url", mode="before")
    @classmethod
    def transform_database_url(cls, v: str | None) -> str | None:
        """Transform database URL to use the asyncpg driver.

        Hosted Postgres providers hand out postgres:// URLs that need
        to be converted to postgresql+asyncpg:// for SQLAlchemy async.
        Also removes sslmode since asyncpg handles SSL via connect_args.
        """
        if v is None:
            return None
        v = v.strip()
        if not v or v.startswith("${"):
            return None

        if v.startswith("postgres://"):
            v = v.replace("postgres://", "postgresql+asyncpg://", 1)
        elif v.startswith("postgresql://"):
            v = v.replace("postgresql://", "postgresql+asyncpg://", 1)

        parsed = urlparse(v)
        if parsed.query:
            query_params = parse_qs(parsed.query)
            query_params.pop("sslmode", None)
            v = urlunparse((
                parsed.scheme,
                parsed.netloc,
                parsed.path,
                parsed.params,
                urlencode(query_params, doseq=True),
                parsed.fragment,
            ))
        return v

    # CORS (for API access from other front-ends)
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # json or text

    @property
    def database_configured(self) -> bool:
        """Check if a database URL is available."""
        return bool(self.database_url)

    @property
    def mock_latency_seconds(self) -> float:
        return max(self.mock_latency_ms, 0) / 1000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
