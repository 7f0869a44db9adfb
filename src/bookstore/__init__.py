"""Bookstore: a book catalogue web service."""

__version__ = "0.1.0"
