"""Unit tests for the book entity and request bodies."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from src.bookstore.entities.book import Book, BookCreate, BookPatch
from src.bookstore.entities.book.entity import MAX_PAGES


class TestBook:
    """Test cases for the Book entity."""

    def test_defaults_are_zero_values(self):
        """Test that a bare Book carries empty title and zero pages."""
        book = Book()

        assert book.id is None
        assert book.title == ""
        assert book.pages == 0
        assert book.created_at is None
        assert book.updated_at is None

    def test_equality_ignores_timestamps(self):
        """Test that books compare by id, title and pages only."""
        first = Book(id="a", title="Narnia", pages=222, created_at=datetime.now(UTC))
        second = Book(id="a", title="Narnia", pages=222)

        assert first == second
        assert hash(first) == hash(second)

    def test_inequality_on_business_fields(self):
        """Test that different pages make books unequal."""
        assert Book(id="a", title="Narnia", pages=222) != Book(
            id="a", title="Narnia", pages=223
        )
        assert Book(title="Narnia", pages=222) != "Narnia"


class TestBookCreate:
    """Test cases for the create request body."""

    def test_missing_fields_default(self):
        """Test that omitted fields become zero values rather than errors."""
        body = BookCreate.model_validate({})

        assert body.title == ""
        assert body.pages == 0

    def test_pages_bounded_by_integer_column(self):
        """Test that pages past a 64-bit integer are rejected when parsing."""
        with pytest.raises(ValidationError):
            BookCreate(title="Big", pages=2**63)
        with pytest.raises(ValidationError):
            BookPatch(pages=2**63)

        assert BookCreate(title="Big", pages=MAX_PAGES).pages == MAX_PAGES

    def test_to_entity(self):
        """Test conversion to an unsaved Book."""
        book = BookCreate(title="Dune", pages=412).to_entity()

        assert book.id is None
        assert book.title == "Dune"
        assert book.pages == 412


class TestBookPatch:
    """Test cases for partial updates."""

    def _stored(self) -> Book:
        return Book(id="b1", title="Narnia", pages=222)

    def test_title_only(self):
        """Test that only the supplied title changes."""
        merged = BookPatch(title="The Silver Chair").apply_to(self._stored())

        assert merged.title == "The Silver Chair"
        assert merged.pages == 222
        assert merged.id == "b1"

    def test_pages_only(self):
        """Test that only the supplied pages change."""
        merged = BookPatch(pages=300).apply_to(self._stored())

        assert merged.title == "Narnia"
        assert merged.pages == 300

    def test_zero_values_are_ignored(self):
        """Test that pages 0 and an empty title leave stored values untouched."""
        merged = BookPatch(title="", pages=0).apply_to(self._stored())

        assert merged.title == "Narnia"
        assert merged.pages == 222

    def test_does_not_mutate_original(self):
        """Test that apply_to returns a copy."""
        stored = self._stored()
        BookPatch(title="Other").apply_to(stored)

        assert stored.title == "Narnia"
