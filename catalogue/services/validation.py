import re
from datetime import date

from catalogue.schemas.book import BookCandidate

MIN_YEAR = 1000

_ISBN_SEPARATORS = re.compile(r"[\s-]")
_ISBN_DIGITS = re.compile(r"[0-9]{10,17}")


def normalize_isbn(isbn: str) -> str:
    return _ISBN_SEPARATORS.sub("", isbn)


def validate_book(candidate: BookCandidate, today: date | None = None) -> list[str]:
    """Check a candidate against the catalogue field rules.

    Every rule is evaluated, so the result lists all violations in rule
    order. An empty list means the candidate is valid.
    """
    current_year = (today or date.today()).year
    errors: list[str] = []

    if not candidate.title or not candidate.title.strip():
        errors.append("Title is required")

    if not candidate.author or not candidate.author.strip():
        errors.append("Author is required")

    if candidate.year and not MIN_YEAR <= candidate.year <= current_year:
        errors.append("Year must be between 1000 and current year")

    if candidate.isbn and not _ISBN_DIGITS.fullmatch(normalize_isbn(candidate.isbn)):
        errors.append("Invalid ISBN format")

    return errors
