"""Entity: Book."""

from typing import Any

from pydantic import BaseModel, Field

from src.bookstore.entities._base import Entity

# Largest value a 64-bit INTEGER column can hold
MAX_PAGES = 2**63 - 1


class Book(Entity):
    """Book entity representing a book in the store.

    Field values are not constrained here; the book validator reports
    structural problems so that every violated rule is listed at once.
    """

    title: str = Field(default="", description="Title")
    pages: int = Field(default=0, description="Number of pages")

    def __eq__(self, other: Any) -> bool:
        """Compare books by business attributes, ignoring timestamps."""
        if not isinstance(other, Book):
            return False

        return (
            self.id == other.id
            and self.title == other.title
            and self.pages == other.pages
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((self.id, self.title, self.pages))


class BookCreate(BaseModel):
    """Request body for creating a book. Missing fields fall to zero values."""

    title: str = ""
    pages: int = Field(default=0, le=MAX_PAGES)

    def to_entity(self) -> Book:
        return Book(title=self.title, pages=self.pages)


class BookPatch(BaseModel):
    """Request body for a partial update.

    Only present, non-empty and non-zero values are merged, so ``pages: 0``
    and ``title: ""`` leave the stored values untouched.
    """

    title: str | None = None
    pages: int | None = Field(default=None, le=MAX_PAGES)

    def apply_to(self, book: Book) -> Book:
        changes: dict[str, Any] = {}
        if self.title:
            changes["title"] = self.title
        if self.pages:
            changes["pages"] = self.pages
        return book.model_copy(update=changes)
