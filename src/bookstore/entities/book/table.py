"""Book database table model."""

from sqlalchemy import UniqueConstraint

from src.bookstore.entities._base import EntityTable


class BookTable(EntityTable, table=True):
    """Database persistence model for books.

    The unique constraint on (title, pages) backs the duplicate check done by
    the validator; a conflicting write is reported as a duplicate.
    """

    __tablename__ = "book"
    __table_args__ = (
        UniqueConstraint("title", "pages", name="uq_book_title_pages"),
    )

    title: str = ""
    pages: int = 0
