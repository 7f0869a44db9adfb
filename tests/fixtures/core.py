from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from src.bookstore.api.http.app import create_app
from src.bookstore.api.http.app_data import ApplicationDependencies, build_dependencies
from src.bookstore.core.services.book import BookService
from src.bookstore.core.services.database.db_session import DbSessionService
from src.bookstore.entities.book import BookRepository
from src.bookstore.runtime.config.config_data import (
    AppConfig,
    ConfigData,
    DatabaseConfig,
    LoggingConfig,
)

__all__ = [
    "app_config",
    "database_service",
    "book_repository",
    "book_service",
    "app_dependencies",
    "client",
]


@pytest.fixture
def app_config() -> ConfigData:
    """Configuration backed by a private in-memory SQLite database."""
    return ConfigData(
        app=AppConfig(environment="test", host="127.0.0.1", port=0),
        database=DatabaseConfig(url="sqlite://"),
        logging=LoggingConfig(level="DEBUG", format="plain", file=""),
    )


@pytest.fixture
def database_service(app_config: ConfigData) -> Generator[DbSessionService]:
    """A connected database; each test gets a fresh, empty store."""
    service = DbSessionService(app_config)
    service.connect()
    try:
        yield service
    finally:
        service.close()


@pytest.fixture
def book_repository(database_service: DbSessionService) -> BookRepository:
    return BookRepository(database_service)


@pytest.fixture
def book_service(book_repository: BookRepository) -> BookService:
    return BookService(book_repository)


@pytest.fixture
def app_dependencies(database_service: DbSessionService) -> ApplicationDependencies:
    return build_dependencies(database_service)


@pytest.fixture
def client(
    app_dependencies: ApplicationDependencies, app_config: ConfigData
) -> Generator[TestClient]:
    app = create_app(app_dependencies, app_config)
    with TestClient(app) as test_client:
        yield test_client
