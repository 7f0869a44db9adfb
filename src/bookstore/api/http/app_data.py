from dataclasses import dataclass

from src.bookstore.core.services.book import BookService, BookValidator
from src.bookstore.core.services.database.db_session import DbSessionService
from src.bookstore.entities.book import BookRepository


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    book_repository: BookRepository
    book_service: BookService


def build_dependencies(database_service: DbSessionService) -> ApplicationDependencies:
    """Wire the repository and domain service onto an existing connection."""
    book_repository = BookRepository(database_service)
    validator = BookValidator.with_uniqueness(book_repository.is_duplicate)
    return ApplicationDependencies(
        database_service=database_service,
        book_repository=book_repository,
        book_service=BookService(book_repository, validator),
    )
