"""Pydantic models for parsing the config.yaml configuration file.

These models handle validation and type conversion of the YAML configuration
data. Every field has a default so an empty ``config:`` section is valid.
"""

from __future__ import annotations

from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field
from sqlalchemy.engine import make_url


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    origin_regex: str | None = Field(
        default=None, description="Regex matched against the Origin header"
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS", "HEAD"]
    )
    allow_headers: list[str] = Field(
        default=["Authorization", "Content-Type", "X-Requested-With"]
    )
    expose_headers: list[str] = Field(default=["Authorization"])
    max_age: int = Field(default=43200, description="Preflight cache age in seconds")


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str = Field(
        default="logs/bookstore.log", description="Log file path (empty disables)"
    )
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./bookstore.db",
        description="Database connection URL",
    )
    name: str = Field(default="bookstore", description="Database name")
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.url).get_backend_name() == "sqlite"

    @property
    def is_postgresql(self) -> bool:
        return make_url(self.url).get_backend_name() == "postgresql"

    @property
    def is_in_memory(self) -> bool:
        url = make_url(self.url)
        return self.is_sqlite and url.database in (None, "", ":memory:")

    @computed_field
    @property
    def connection_string(self) -> str:
        """Connection URL with the configured database name applied.

        SQLite URLs name a file (or memory), so they are used as-is.
        """
        base_url = make_url(self.url)
        if self.is_sqlite:
            return self.url

        if self.name and self.name != base_url.database:
            logger.warning(
                "Database name '{}' does not match the one in the URL '{}'. Using '{}'.",
                self.name,
                base_url.database,
                self.name,
            )
            base_url = base_url.set(database=self.name)

        return base_url.render_as_string(hide_password=False)


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="0.0.0.0", description="Address to bind")
    port: int = Field(default=8080, description="Port to listen on")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
