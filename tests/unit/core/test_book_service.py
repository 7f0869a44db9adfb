"""Unit tests for BookService against an in-memory store."""

import uuid

import pytest

from src.bookstore.core.errors import (
    InvalidIdentifier,
    NotFound,
    StorageUnavailable,
    ValidationFailed,
)
from src.bookstore.core.services.book import BookService, BookValidator
from src.bookstore.entities.book import Book, BookPatch


class TestCreate:
    """Test cases for BookService.create."""

    def test_create_returns_stored_book(self, book_service: BookService):
        created = book_service.create(Book(title="Narnia", pages=222))

        assert created.id is not None
        assert created.title == "Narnia"
        assert created.pages == 222
        assert created.created_at is not None
        assert created.created_at == created.updated_at
        assert book_service.read_by_id(created.id) == created

    def test_create_ignores_client_identifier(self, book_service: BookService):
        created = book_service.create(Book(id="chosen-by-client", title="A", pages=1))

        assert created.id != "chosen-by-client"
        uuid.UUID(created.id)

    def test_create_rejects_structural_violations(self, book_service, book_repository):
        with pytest.raises(ValidationFailed) as exc_info:
            book_service.create(Book(title="", pages=0))

        assert exc_info.value.fields == ["title", "pages"]
        assert book_repository.find_all() == []

    def test_create_rejects_unstorable_pages(self, book_service, book_repository):
        with pytest.raises(ValidationFailed) as exc_info:
            book_service.create(Book(title="Big", pages=2**63))

        assert exc_info.value.fields == ["pages"]
        assert book_repository.find_all() == []

    def test_create_rejects_duplicate(self, book_service, book_repository):
        book_service.create(Book(title="Narnia", pages=222))

        with pytest.raises(ValidationFailed) as exc_info:
            book_service.create(Book(title="Narnia", pages=222))

        assert exc_info.value.duplicate is True
        assert book_repository.count("Narnia", 222) == 1

    def test_same_title_different_pages_allowed(self, book_service: BookService):
        book_service.create(Book(title="Narnia", pages=222))
        book_service.create(Book(title="Narnia", pages=223))

        assert len(book_service.read_all()) == 2

    def test_create_refused_when_lookup_fails(self, book_repository, monkeypatch):
        """Test that a failing duplicate check rejects the book."""
        service = BookService(book_repository)

        def broken_count(title, pages):
            raise StorageUnavailable("count")

        monkeypatch.setattr(book_repository, "count", broken_count)

        with pytest.raises(ValidationFailed) as exc_info:
            service.create(Book(title="Narnia", pages=222))

        assert exc_info.value.duplicate is True

    def test_constraint_backs_up_the_lookup(self, book_repository):
        """Test that the store rejects a duplicate the validator missed."""
        service = BookService(
            book_repository,
            validator=BookValidator.with_uniqueness(lambda title, pages: False),
        )
        service.create(Book(title="Narnia", pages=222))

        with pytest.raises(ValidationFailed) as exc_info:
            service.create(Book(title="Narnia", pages=222))

        assert exc_info.value.duplicate is True


class TestRead:
    def test_read_all_empty(self, book_service: BookService):
        assert book_service.read_all() == []

    def test_read_by_id_invalid(self, book_service: BookService):
        with pytest.raises(InvalidIdentifier):
            book_service.read_by_id("nope")

    def test_read_by_id_missing(self, book_service: BookService):
        with pytest.raises(NotFound):
            book_service.read_by_id(str(uuid.uuid4()))


class TestUpdate:
    def test_partial_update_keeps_other_fields(self, book_service: BookService):
        created = book_service.create(Book(title="Narnia", pages=222))

        updated = book_service.update(created.id, BookPatch(pages=300))

        assert updated.id == created.id
        assert updated.title == "Narnia"
        assert updated.pages == 300
        assert book_service.read_by_id(created.id).pages == 300

    def test_update_refreshes_updated_at(self, book_service: BookService):
        created = book_service.create(Book(title="Narnia", pages=222))

        updated = book_service.update(created.id, BookPatch(title="Emma"))

        assert updated.updated_at is not None
        assert updated.updated_at.replace(tzinfo=None) >= created.updated_at.replace(
            tzinfo=None
        )

    def test_update_zero_pages_is_ignored(self, book_service: BookService):
        created = book_service.create(Book(title="Narnia", pages=222))

        updated = book_service.update(created.id, BookPatch(pages=0))

        assert updated.pages == 222

    def test_update_invalid_identifier(self, book_service: BookService):
        with pytest.raises(InvalidIdentifier):
            book_service.update("nope", BookPatch(title="x"))

    def test_update_missing(self, book_service: BookService):
        with pytest.raises(NotFound):
            book_service.update(str(uuid.uuid4()), BookPatch(title="x"))

    def test_update_onto_existing_pair_rejected(self, book_service: BookService):
        book_service.create(Book(title="Narnia", pages=222))
        other = book_service.create(Book(title="Emma", pages=222))

        with pytest.raises(ValidationFailed) as exc_info:
            book_service.update(other.id, BookPatch(title="Narnia"))

        assert exc_info.value.duplicate is True
        assert book_service.read_by_id(other.id).title == "Emma"


class TestDelete:
    def test_delete(self, book_service: BookService):
        created = book_service.create(Book(title="Narnia", pages=222))

        book_service.delete(created.id)

        with pytest.raises(NotFound):
            book_service.read_by_id(created.id)

    def test_delete_twice(self, book_service: BookService):
        created = book_service.create(Book(title="Narnia", pages=222))
        book_service.delete(created.id)

        with pytest.raises(NotFound):
            book_service.delete(created.id)

    def test_delete_invalid_identifier(self, book_service: BookService):
        with pytest.raises(InvalidIdentifier):
            book_service.delete("nope")
