"""Domain errors raised by the book services and the persistence gateway.

Every error carries an ``ErrorKind`` so the HTTP layer can pick a status code
without looking at message text.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    """Classification of domain failures."""

    INVALID_IDENTIFIER = "invalid_identifier"
    NOT_FOUND = "not_found"
    VALIDATION_FAILED = "validation_failed"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class RuleViolation:
    """A single failed validation rule."""

    field: str
    rule: str
    message: str

    @classmethod
    def duplicate(cls, title: str, pages: int) -> "RuleViolation":
        return cls(
            field="title",
            rule="unique",
            message=f"book with title {title} and pages {pages} already exists",
        )

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class BookstoreError(Exception):
    """Base class for all domain errors."""

    kind: ErrorKind = ErrorKind.UNCLASSIFIED

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class Unclassified(BookstoreError):
    """Raised for failures that fit no other kind."""


class InvalidIdentifier(BookstoreError):
    """Raised when an identifier is not a well-formed UUID string."""

    kind = ErrorKind.INVALID_IDENTIFIER

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"the provided identifier {identifier!r} is not a valid UUID")


class NotFound(BookstoreError):
    """Raised when a well-formed identifier matches no stored record."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, identifier: str) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} with id {identifier} not found")


class ValidationFailed(BookstoreError):
    """Raised when a candidate record violates one or more rules."""

    kind = ErrorKind.VALIDATION_FAILED

    def __init__(self, violations: list[RuleViolation]) -> None:
        self.violations = list(violations)
        if self.duplicate:
            message = "; ".join(v.message for v in self.violations)
        else:
            message = "book validation failed: " + "; ".join(
                str(v) for v in self.violations
            )
        super().__init__(message)

    @property
    def duplicate(self) -> bool:
        """True when the failure is the title/pages uniqueness rule."""
        return any(v.rule == "unique" for v in self.violations)

    @property
    def fields(self) -> list[str]:
        return [v.field for v in self.violations]


class StorageUnavailable(BookstoreError):
    """Raised when the store cannot be reached or a write fails."""

    kind = ErrorKind.STORAGE_UNAVAILABLE

    def __init__(self, operation: str, detail: str | None = None) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"storage unavailable during {operation}")
