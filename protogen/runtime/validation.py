"""Accumulated validation results and predefined checks."""

from enum import Enum
from typing import Generic, Iterable, Iterator, List, Optional, TypeVar

from email_validator import EmailNotValidError
from email_validator import validate_email as parse_email

E = TypeVar("E", bound=Enum)


class ValidationResult(Generic[E]):
    """Every problem found with a value, in the order the checks ran."""

    def __init__(self, errors: Optional[Iterable[E]] = None):
        self.errors: List[E] = list(errors or [])

    def add(self, error: E) -> None:
        self.errors.append(error)

    def is_ok(self) -> bool:
        return not self.errors

    def __iter__(self) -> Iterator[E]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def __contains__(self, error) -> bool:
        return error in self.errors

    def __eq__(self, other) -> bool:
        if not isinstance(other, ValidationResult):
            return NotImplemented
        return self.errors == other.errors

    def __repr__(self) -> str:
        return f"ValidationResult({self.errors!r})"


def validate_email(text: str) -> bool:
    """Check that ``text`` is a syntactically valid e-mail address."""
    try:
        parse_email(text, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True
