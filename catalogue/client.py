"""
HTTP client for the catalogue API with an offline fallback.

The client keeps its own copy of the collection. Whenever the API cannot be
reached or answers with a non-2xx status, the operation is applied to that
in-memory copy instead, so callers keep working without persistence.
"""
from __future__ import annotations

from typing import Any

import httpx

from catalogue.core.logging import get_logger
from catalogue.models.book import DEFAULT_GENRE, Book, utcnow
from catalogue.repos.book_repo import BookRepository, sample_books
from catalogue.schemas.book import BookCandidate, BookPage
from catalogue.schemas.stats import CatalogueStats
from catalogue.services import query

DEFAULT_API_URL = "http://localhost:3000/api"

logger = get_logger(__name__)


class CatalogueClient:
    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        http: httpx.Client | None = None,
        timeout: float = 5.0,
    ):
        self.api_url: str = api_url.rstrip("/")
        self._http: httpx.Client = http or httpx.Client(timeout=timeout)
        self._owns_http: bool = http is None
        self.books: list[Book] = []
        self.offline: bool = False

    def __enter__(self) -> CatalogueClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        response = self._http.request(method, f"{self.api_url}{path}", **kwargs)
        response.raise_for_status()
        return response

    def _go_offline(self, reason: Exception) -> None:
        if not self.offline:
            logger.warning("Catalogue API unavailable, working offline: %s", reason)
        self.offline = True

    # Fetch the collection; sample books stand in when the API is down
    def load_books(self) -> list[Book]:
        try:
            page = BookPage.model_validate(self._request("GET", "/books").json())
        except (httpx.HTTPError, ValueError) as e:
            self._go_offline(e)
            self.books = sample_books()
        else:
            self.offline = False
            self.books = page.books
        return list(self.books)

    def filter_books(
        self,
        search: str = "",
        genre: str = "",
        year: str = "",
        sort: str = query.DEFAULT_SORT,
    ) -> list[Book]:
        """Filter and sort the local copy, as the browser does on every keystroke."""
        matches = query.filter_books(self.books, search=search, genre=genre, year=year)
        return query.sort_books(matches, sort)

    def stats(self) -> CatalogueStats:
        return query.compute_stats(self.books)

    def genres(self) -> list[str]:
        return query.distinct_genres(self.books)

    def years(self) -> list[int]:
        """Distinct publication years, newest first."""
        return sorted({b.year for b in self.books if b.year}, reverse=True)

    # Create (book_id None) or update a book; None when the book to update is unknown offline
    def save_book(
        self, data: BookCandidate | dict[str, Any], book_id: int | None = None
    ) -> Book | None:
        candidate = (
            data if isinstance(data, BookCandidate) else BookCandidate.model_validate(data)
        )
        payload = candidate.model_dump()
        try:
            if book_id is None:
                response = self._request("POST", "/books", json=payload)
            else:
                response = self._request("PUT", f"/books/{book_id}", json=payload)
        except httpx.HTTPError as e:
            self._go_offline(e)
            return self._save_locally(candidate, book_id)

        saved = Book.model_validate(response.json())
        self.load_books()
        return saved

    def delete_book(self, book_id: int) -> None:
        try:
            self._request("DELETE", f"/books/{book_id}")
        except httpx.HTTPError as e:
            self._go_offline(e)
            self.books = [b for b in self.books if b.id != book_id]
            return
        self.load_books()

    def _save_locally(self, candidate: BookCandidate, book_id: int | None) -> Book | None:
        fields: dict[str, Any] = {
            "title": candidate.title or "",
            "author": candidate.author or "",
            "genre": candidate.genre or DEFAULT_GENRE,
            "year": candidate.year or None,
            "description": candidate.description or "",
            "isbn": candidate.isbn or "",
        }

        if book_id is None:
            book = Book(id=BookRepository.next_id(self.books), **fields)
            self.books.append(book)
            return book

        index = BookRepository.find(self.books, book_id)
        if index is None:
            return None
        book = self.books[index].model_copy(update={**fields, "updated_at": utcnow()})
        self.books[index] = book
        return book
