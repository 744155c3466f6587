"""
In-memory filtering, sorting, pagination and aggregation over a book collection.

Nothing here holds state: every function takes the collection it works on, so
the API and the offline client share the same logic.
"""
from __future__ import annotations

import unicodedata
from collections import Counter
from collections.abc import Iterable, Sequence

from catalogue.models.book import Book
from catalogue.schemas.book import BookPage, BookQuery
from catalogue.schemas.stats import CatalogueStats
from catalogue.utils.pagination import page_bounds

SORT_KEYS = ("title", "author", "year", "newest")
DEFAULT_SORT = "title"
RECENT_LIMIT = 5


def collation_key(value: str) -> tuple[str, str]:
    """Sort key approximating locale collation: accents and case are secondary."""
    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), value


def _contains(haystack: str | None, needle: str) -> bool:
    return bool(haystack) and needle in haystack.lower()


def _year_matches(year: int | None, raw: str) -> bool:
    # "1960", " 1960 " and "1960.0" all equal 1960
    if year is None:
        return False
    try:
        return float(raw.strip()) == year
    except ValueError:
        return False


def filter_books(
    books: Iterable[Book],
    search: str | None = None,
    genre: str | None = None,
    year: str | None = None,
    author: str | None = None,
) -> list[Book]:
    """AND-combine the given filters; empty values are ignored."""
    result = list(books)

    if search:
        needle = search.lower()
        result = [
            b for b in result
            if _contains(b.title, needle)
            or _contains(b.author, needle)
            or _contains(b.genre, needle)
            or _contains(b.description, needle)
        ]

    if genre:
        result = [b for b in result if b.genre == genre]

    if year:
        result = [b for b in result if _year_matches(b.year, year)]

    if author:
        needle = author.lower()
        result = [b for b in result if _contains(b.author, needle)]

    return result


def sort_books(books: Iterable[Book], sort: str | None = DEFAULT_SORT) -> list[Book]:
    """Order books by ``title``, ``author``, ``year`` or ``newest``.

    Unknown keys sort by title. Books without a year count as year 0.
    """
    if sort == "author":
        return sorted(books, key=lambda b: collation_key(b.author))
    if sort == "year":
        return sorted(books, key=lambda b: b.year or 0)
    if sort == "newest":
        return sorted(books, key=lambda b: b.year or 0, reverse=True)
    return sorted(books, key=lambda b: collation_key(b.title))


def paginate(books: Sequence[Book], limit: str | int | None, offset: str | int | None) -> list[Book]:
    bounds = page_bounds(limit, offset)
    if bounds is None:
        return list(books)
    return list(books[bounds])


def query_books(books: Sequence[Book], params: BookQuery) -> BookPage:
    """Filter, optionally sort, then page ``books``.

    ``total`` counts the filtered books before paging; ``count`` is the size
    of the returned page.
    """
    filtered = filter_books(
        books,
        search=params.search,
        genre=params.genre,
        year=params.year,
        author=params.author,
    )
    if params.sort:
        filtered = sort_books(filtered, params.sort)

    page = paginate(filtered, params.limit, params.offset)
    return BookPage(books=page, total=len(filtered), count=len(page))


def decade_label(year: int) -> str:
    return f"{year // 10 * 10}s"


def distinct_genres(books: Iterable[Book]) -> list[str]:
    return sorted({b.genre for b in books})


def distinct_authors(books: Iterable[Book]) -> list[str]:
    return sorted({b.author for b in books})


def compute_stats(books: Sequence[Book]) -> CatalogueStats:
    genre_counts = Counter(b.genre for b in books)
    decade_counts = Counter(decade_label(b.year) for b in books if b.year)
    recent = sorted(books, key=lambda b: b.created_at, reverse=True)[:RECENT_LIMIT]

    return CatalogueStats(
        total_books=len(books),
        total_authors=len({b.author for b in books}),
        total_genres=len(genre_counts),
        genre_distribution=dict(genre_counts),
        year_distribution=dict(decade_counts),
        recently_added=recent,
    )
