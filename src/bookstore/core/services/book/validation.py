"""Book validation rules.

Structural rules look only at the candidate. Data rules consult the store and
run only once every structural rule has passed, since a lookup on a malformed
candidate is meaningless.
"""

from collections.abc import Callable, Sequence

from loguru import logger

from src.bookstore.core.errors import RuleViolation, ValidationFailed
from src.bookstore.entities.book import Book
from src.bookstore.entities.book.entity import MAX_PAGES

ValidationRule = Callable[[Book], RuleViolation | None]


def title_required(book: Book) -> RuleViolation | None:
    if not book.title:
        return RuleViolation(
            field="title", rule="required", message="must be a non-empty string"
        )
    return None


def pages_positive(book: Book) -> RuleViolation | None:
    if book.pages is None or book.pages < 1:
        return RuleViolation(
            field="pages", rule="min", message="must be an integer of at least 1"
        )
    return None


def pages_storable(book: Book) -> RuleViolation | None:
    if book.pages is not None and book.pages > MAX_PAGES:
        return RuleViolation(
            field="pages", rule="max", message=f"must be at most {MAX_PAGES}"
        )
    return None


class UniqueTitleAndPages:
    """Rejects a candidate whose (title, pages) pair is already stored.

    ``lookup`` answers whether the pair is taken; it is expected to fail
    closed (answer True) when the store cannot be queried.
    """

    def __init__(self, lookup: Callable[[str, int], bool]):
        self._lookup = lookup

    def __call__(self, book: Book) -> RuleViolation | None:
        if self._lookup(book.title, book.pages):
            return RuleViolation.duplicate(book.title, book.pages)
        return None


STRUCTURAL_RULES: tuple[ValidationRule, ...] = (
    title_required,
    pages_positive,
    pages_storable,
)


class BookValidator:
    """Runs structural rules, then data-dependent rules, in a fixed order."""

    def __init__(
        self,
        data_rules: Sequence[ValidationRule] = (),
        structural_rules: Sequence[ValidationRule] = STRUCTURAL_RULES,
    ):
        self._structural_rules = tuple(structural_rules)
        self._data_rules = tuple(data_rules)

    @classmethod
    def with_uniqueness(cls, lookup: Callable[[str, int], bool]) -> "BookValidator":
        return cls(data_rules=(UniqueTitleAndPages(lookup),))

    def validate(self, book: Book, *, check_data_rules: bool = True) -> None:
        """Raise ValidationFailed listing every violated rule.

        Args:
            book: Candidate to check.
            check_data_rules: Run the rules that query the store.
        """
        violations = self._run(self._structural_rules, book)
        if not violations and check_data_rules:
            violations = self._run(self._data_rules, book)

        if violations:
            logger.debug(
                "Book failed validation: {}",
                ", ".join(f"{v.field}/{v.rule}" for v in violations),
            )
            raise ValidationFailed(violations)

    @staticmethod
    def _run(rules: Sequence[ValidationRule], book: Book) -> list[RuleViolation]:
        violations = []
        for rule in rules:
            violation = rule(book)
            if violation is not None:
                violations.append(violation)
        return violations
