"""Entity package: Book."""

from .entity import Book, BookCreate, BookPatch
from .repository import BookRepository
from .table import BookTable

__all__ = ["Book", "BookCreate", "BookPatch", "BookRepository", "BookTable"]
