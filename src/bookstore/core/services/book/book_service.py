"""Book domain service: validation, uniqueness and persistence for each request."""

from loguru import logger

from src.bookstore.core.services.book.validation import BookValidator
from src.bookstore.entities._base import utcnow
from src.bookstore.entities.book import Book, BookPatch, BookRepository


class BookService:
    """Create, read, update and delete books.

    Holds no state between calls. Errors from the validator and the
    repository propagate unchanged so callers can switch on their kind.
    """

    def __init__(
        self,
        repository: BookRepository,
        validator: BookValidator | None = None,
    ) -> None:
        self._repository = repository
        self._validator = validator or BookValidator.with_uniqueness(
            repository.is_duplicate
        )

    def read_by_id(self, book_id: str) -> Book:
        return self._repository.find_by_id(book_id)

    def read_all(self) -> list[Book]:
        return self._repository.find_all()

    def create(self, candidate: Book) -> Book:
        """Validate and store a new book.

        Timestamps are stamped before validation so the validator sees a
        fully populated record.

        Raises:
            ValidationFailed: A structural rule failed or the (title, pages)
                pair already exists.
            StorageUnavailable: The insert failed.
        """
        now = utcnow()
        book = candidate.model_copy(
            update={"id": None, "created_at": now, "updated_at": now}
        )
        self._validator.validate(book)

        book_id = self._repository.insert(book)
        logger.info("Created book {} ({!r}, {} pages)", book_id, book.title, book.pages)
        return book.model_copy(update={"id": book_id})

    def update(self, book_id: str, patch: BookPatch) -> Book:
        """Merge ``patch`` onto the stored book and persist it.

        The merged record is not re-validated.
        """
        stored = self.read_by_id(book_id)
        merged = patch.apply_to(stored).model_copy(update={"updated_at": utcnow()})

        updated = self._repository.update(merged)
        logger.info("Updated book {}", updated.id)
        return updated

    def delete(self, book_id: str) -> None:
        stored = self.read_by_id(book_id)
        self._repository.delete(stored)
        logger.info("Deleted book {}", stored.id)
