"""FastAPI dependency implementations."""

from fastapi import Request

from src.bookstore.api.http.app_data import ApplicationDependencies
from src.bookstore.core.services.book import BookService


def get_book_service(request: Request) -> BookService:
    """Get the book domain service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.book_service
