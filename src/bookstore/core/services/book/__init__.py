"""Book domain service and validation."""

from .book_service import BookService
from .validation import BookValidator, UniqueTitleAndPages

__all__ = ["BookService", "BookValidator", "UniqueTitleAndPages"]
