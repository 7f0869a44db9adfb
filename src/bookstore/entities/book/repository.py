"""Data-access layer for books."""

import uuid

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import func, select

from src.bookstore.core.errors import (
    InvalidIdentifier,
    NotFound,
    RuleViolation,
    StorageUnavailable,
    ValidationFailed,
)
from src.bookstore.core.services.database.db_session import DbSessionService
from src.bookstore.entities._base import utcnow
from src.bookstore.entities.book.entity import Book
from src.bookstore.entities.book.table import BookTable


def parse_identifier(book_id: str) -> str:
    """Return the canonical form of ``book_id`` or raise InvalidIdentifier."""
    try:
        return str(uuid.UUID(book_id))
    except (TypeError, ValueError, AttributeError) as e:
        raise InvalidIdentifier(book_id) from e


class BookRepository:
    """Persistence gateway for books.

    Every method is one round-trip in its own transaction. SQLAlchemy errors
    surface as StorageUnavailable; nothing is retried.
    """

    def __init__(self, database: DbSessionService) -> None:
        self._database = database

    def insert(self, book: Book) -> str:
        """Store a new book and return its generated identifier."""
        now = utcnow()
        row = BookTable(
            title=book.title,
            pages=book.pages,
            created_at=book.created_at or now,
            updated_at=book.updated_at or now,
        )
        try:
            with self._database.session_scope() as session:
                session.add(row)
                session.flush()
                return row.id
        except IntegrityError as e:
            raise ValidationFailed([RuleViolation.duplicate(book.title, book.pages)]) from e
        except SQLAlchemyError as e:
            logger.error("Failed to insert book: {}", e)
            raise StorageUnavailable("insert", str(e)) from e

    def find_by_id(self, book_id: str) -> Book:
        """Fetch one book.

        Raises:
            InvalidIdentifier: ``book_id`` is not a UUID string.
            NotFound: no book has this identifier.
        """
        key = parse_identifier(book_id)
        try:
            with self._database.session_scope() as session:
                row = session.get(BookTable, key)
                if row is None:
                    raise NotFound("book", key)
                return Book.model_validate(row, from_attributes=True)
        except SQLAlchemyError as e:
            logger.error("Failed to read book {}: {}", key, e)
            raise StorageUnavailable("find", str(e)) from e

    def find_all(self) -> list[Book]:
        try:
            with self._database.session_scope() as session:
                rows = session.exec(select(BookTable)).all()
                return [Book.model_validate(row, from_attributes=True) for row in rows]
        except SQLAlchemyError as e:
            logger.error("Failed to list books: {}", e)
            raise StorageUnavailable("find_all", str(e)) from e

    def update(self, book: Book) -> Book:
        """Persist the fields of an already-resolved book."""
        try:
            with self._database.session_scope() as session:
                row = session.get(BookTable, book.id)
                if row is None:
                    raise NotFound("book", book.id)
                row.title = book.title
                row.pages = book.pages
                row.updated_at = book.updated_at or utcnow()
                session.add(row)
                session.flush()
                return Book.model_validate(row, from_attributes=True)
        except IntegrityError as e:
            raise ValidationFailed([RuleViolation.duplicate(book.title, book.pages)]) from e
        except SQLAlchemyError as e:
            logger.error("Failed to update book {}: {}", book.id, e)
            raise StorageUnavailable("update", str(e)) from e

    def delete(self, book: Book) -> None:
        """Remove an already-resolved book."""
        try:
            with self._database.session_scope() as session:
                row = session.get(BookTable, book.id)
                if row is None:
                    raise NotFound("book", book.id)
                session.delete(row)
        except SQLAlchemyError as e:
            logger.error("Failed to delete book {}: {}", book.id, e)
            raise StorageUnavailable("delete", str(e)) from e

    def count(self, title: str, pages: int) -> int:
        """Count stored books with this (title, pages) pair."""
        statement = (
            select(func.count())
            .select_from(BookTable)
            .where(BookTable.title == title, BookTable.pages == pages)
        )
        try:
            with self._database.session_scope() as session:
                return session.exec(statement).one()
        except SQLAlchemyError as e:
            raise StorageUnavailable("count", str(e)) from e

    def is_duplicate(self, title: str, pages: int) -> bool:
        """Whether the pair is taken; a failed query counts as taken."""
        try:
            return self.count(title, pages) > 0
        except StorageUnavailable as e:
            logger.warning(
                "Duplicate check failed, treating book as duplicate: {}", e.detail
            )
            return True
