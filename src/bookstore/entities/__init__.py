"""Entities grouped by business concept.

Each entity has its own package containing:
- entity.py: Domain model and request payloads
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .book import Book, BookCreate, BookPatch, BookRepository, BookTable

__all__ = [
    "Book",
    "BookCreate",
    "BookPatch",
    "BookRepository",
    "BookTable",
]
