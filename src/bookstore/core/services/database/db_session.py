"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import StaticPool, text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine

from src.bookstore.core.errors import StorageUnavailable
from src.bookstore.runtime.config.config_data import ConfigData
from src.bookstore.runtime.context import get_config


class DbSessionService:
    """Owns the engine (connection pool) shared by every request."""

    def __init__(self, config: ConfigData | None = None):
        """Initialize the shared database engine and session factory."""

        logger.info("Setting up database engine and session factory")
        main_config = config or get_config()
        db_config = main_config.database
        self._config = main_config

        logger.info(
            "Configuring database engine for environment: {}",
            main_config.app.environment,
        )
        engine_kwargs = self._get_engine_kwargs(main_config)

        self._engine = create_engine(db_config.connection_string, **engine_kwargs)
        self._connected = False

        if main_config.app.environment == "production":
            logger.bind(
                pool_size=db_config.pool_size,
                max_overflow=db_config.max_overflow,
                pool_timeout=db_config.pool_timeout,
                pool_recycle=db_config.pool_recycle,
            ).info("Database engine initialized")

    @property
    def engine(self):
        return self._engine

    @property
    def connected(self) -> bool:
        return self._connected

    def _get_engine_kwargs(self, config: ConfigData) -> dict[str, Any]:
        db_config = config.database
        kwargs: dict[str, Any] = {
            "echo": False,
            "echo_pool": False,
            "connect_args": self._get_connect_args(config),
        }

        if db_config.is_in_memory:
            # One shared connection, otherwise every checkout sees an empty database
            kwargs["poolclass"] = StaticPool
            return kwargs

        kwargs.update(
            {
                "pool_size": db_config.pool_size,
                "max_overflow": db_config.max_overflow,
                "pool_timeout": db_config.pool_timeout,
                "pool_recycle": db_config.pool_recycle,
                "pool_pre_ping": True,
            }
        )
        return kwargs

    def _get_connect_args(self, config: ConfigData) -> dict:
        """Get database-specific connection arguments."""
        connect_args = {}

        if config.database.is_postgresql:
            connect_args.update(
                {
                    "application_name": f"{config.app.environment}_bookstore",
                    "connect_timeout": 30,
                }
            )

        elif config.database.is_sqlite:
            connect_args.update(
                {
                    "check_same_thread": False,  # handlers run in the threadpool
                    "timeout": 20,
                }
            )

            if config.app.environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better performance and reliability."
                )

        return connect_args

    def create_all(self) -> None:
        """Create all database tables."""
        from src.bookstore.entities.book import BookTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def connect(self) -> None:
        """Create tables and ping the store.

        Raises:
            StorageUnavailable: If the store cannot be reached.
        """
        try:
            self.create_all()
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(
                "Database connection failed: {}",
                e,
            )
            raise StorageUnavailable("connect", str(e)) from e

        self._connected = True
        logger.info("Connected to database {}", self._config.database.name)

    def close(self) -> None:
        """Release every pooled connection."""
        self._engine.dispose()
        self._connected = False
        logger.info("Database connection closed")

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,  # Prevent lazy loading issues
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Commit on success, roll back and re-raise on failure."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.bind(
                error_type=type(e).__name__,
                error_message=str(e),
            ).debug("Database transaction rolled back")
            raise
        finally:
            db.close()

