"""Book API router with CRUD operations."""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from src.bookstore.api.http.deps import get_book_service
from src.bookstore.core.services.book import BookService
from src.bookstore.entities.book import Book, BookCreate, BookPatch

router = APIRouter(prefix="/api/v1/books", tags=["books"])


class BookResponse(BaseModel):
    data: Book


class BookListResponse(BaseModel):
    data: list[Book]


@router.get("", response_model=BookListResponse)
def list_books(
    service: BookService = Depends(get_book_service),
) -> BookListResponse:
    """List all books."""
    return BookListResponse(data=service.read_all())


@router.get("/{book_id}", response_model=BookResponse)
def get_book(
    book_id: str,
    service: BookService = Depends(get_book_service),
) -> BookResponse:
    """Get a book by ID."""
    return BookResponse(data=service.read_by_id(book_id))


@router.post("", response_model=Book, status_code=status.HTTP_201_CREATED)
def create_book(
    payload: BookCreate,
    service: BookService = Depends(get_book_service),
) -> Book:
    """Create a new book."""
    return service.create(payload.to_entity())


@router.put("/{book_id}", response_model=Book)
def update_book(
    book_id: str,
    payload: BookPatch,
    service: BookService = Depends(get_book_service),
) -> Book:
    """Update the supplied fields of a book."""
    return service.update(book_id, payload)


@router.delete("/{book_id}")
def delete_book(
    book_id: str,
    service: BookService = Depends(get_book_service),
) -> str:
    """Delete a book."""
    service.delete(book_id)
    return f"book {book_id} deleted"
