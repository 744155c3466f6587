from __future__ import annotations
from typing import Any
from pydantic import ValidationError

from catalogue.core.errors import (
    BookNotFoundError,
    BookValidationError,
    DuplicateBookError,
    MalformedRequestError,
    format_validation_errors,
)
from catalogue.core.logging import get_logger
from catalogue.models.book import DEFAULT_GENRE, Book, utcnow
from catalogue.repos.book_repo import BookRepository
from catalogue.schemas.book import (
    BookCandidate,
    BookPage,
    BookQuery,
    BulkCreateResult,
    BulkItemError,
    DeleteResult,
)
from catalogue.schemas.stats import CatalogueStats
from catalogue.services import query
from catalogue.services.validation import validate_book

logger = get_logger(__name__)


def _editable_fields(data: BookCandidate) -> dict[str, Any]:
    # Only called on validated candidates, so title/author are set
    return {
        "title": (data.title or "").strip(),
        "author": (data.author or "").strip(),
        "genre": data.genre or DEFAULT_GENRE,
        "year": data.year or None,
        "description": data.description.strip() if data.description else "",
        "isbn": data.isbn.strip() if data.isbn else "",
    }


def _check(data: BookCandidate) -> None:
    errors = validate_book(data)
    if errors:
        raise BookValidationError(errors)


class BookService:
    @staticmethod
    # List books
    def list_books(repo: BookRepository, params: BookQuery) -> BookPage:
        return query.query_books(repo.load_all(), params)

    @staticmethod
    # Get a book by ID
    def get_book(repo: BookRepository, book_id: int) -> Book:
        books = repo.load_all()
        index = repo.find(books, book_id)
        if index is None:
            raise BookNotFoundError()
        return books[index]

    @staticmethod
    # Create book
    def create_book(repo: BookRepository, data: BookCandidate) -> Book:
        _check(data)

        with repo.writing() as books:
            fields = _editable_fields(data)
            if repo.duplicate_exists(books, fields["title"], fields["author"]):
                raise DuplicateBookError()

            now = utcnow()
            book = Book(id=repo.next_id(books), created_at=now, updated_at=now, **fields)
            books.append(book)
            repo.save_all(books)

        logger.info("Created book %d (%s)", book.id, book.title)
        return book

    @staticmethod
    # Update book; id and createdAt are preserved
    def update_book(repo: BookRepository, book_id: int, data: BookCandidate) -> Book:
        _check(data)

        with repo.writing() as books:
            index = repo.find(books, book_id)
            if index is None:
                raise BookNotFoundError()

            fields = _editable_fields(data)
            if repo.duplicate_exists(
                books, fields["title"], fields["author"], exclude_id=book_id
            ):
                raise DuplicateBookError()

            updated = books[index].model_copy(update={**fields, "updated_at": utcnow()})
            books[index] = updated
            repo.save_all(books)

        logger.info("Updated book %d", book_id)
        return updated

    @staticmethod
    # Delete book
    def delete_book(repo: BookRepository, book_id: int) -> DeleteResult:
        with repo.writing() as books:
            index = repo.find(books, book_id)
            if index is None:
                raise BookNotFoundError()
            removed = books.pop(index)
            repo.save_all(books)

        logger.info("Deleted book %d", book_id)
        return DeleteResult(message="Book deleted successfully", book=removed)

    @staticmethod
    # Bulk create; each entry succeeds or fails on its own
    def bulk_create(repo: BookRepository, items: Any) -> BulkCreateResult:
        if not isinstance(items, list):
            raise MalformedRequestError("Books data must be an array")

        result = BulkCreateResult()
        with repo.writing() as books:
            for i, item in enumerate(items):
                try:
                    data = BookCandidate.model_validate(item)
                except ValidationError as e:
                    result.errors.append(
                        BulkItemError(index=i, errors=format_validation_errors(e.errors()))
                    )
                    continue

                errors = validate_book(data)
                if errors:
                    result.errors.append(BulkItemError(index=i, errors=errors))
                    continue

                fields = _editable_fields(data)
                # Earlier entries of the same batch count as existing books
                if repo.duplicate_exists(books, fields["title"], fields["author"]):
                    result.errors.append(
                        BulkItemError(index=i, errors=[DuplicateBookError.message])
                    )
                    continue

                now = utcnow()
                book = Book(id=repo.next_id(books), created_at=now, updated_at=now, **fields)
                books.append(book)
                result.success.append(book)

            if result.success:
                repo.save_all(books)

        logger.info(
            "Bulk create: %d created, %d rejected",
            len(result.success),
            len(result.errors),
        )
        return result

    @staticmethod
    def stats(repo: BookRepository) -> CatalogueStats:
        return query.compute_stats(repo.load_all())

    @staticmethod
    def genres(repo: BookRepository) -> list[str]:
        return query.distinct_genres(repo.load_all())

    @staticmethod
    def authors(repo: BookRepository) -> list[str]:
        return query.distinct_authors(repo.load_all())
