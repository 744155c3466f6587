from fastapi import APIRouter, Body, Depends, Query
from typing import Annotated, Any
from starlette.status import HTTP_201_CREATED

from catalogue.core.errors import BookNotFoundError
from catalogue.db.store import get_book_repository
from catalogue.models.book import Book
from catalogue.repos.book_repo import BookRepository
from catalogue.schemas.book import (
    BookCandidate,
    BookPage,
    BookQuery,
    BulkCreateResult,
    DeleteResult,
)
from catalogue.services.book_service import BookService
from catalogue.utils.pagination import parse_int

router = APIRouter(prefix="/books", tags=["books"])

Repo = Annotated[BookRepository, Depends(get_book_repository)]


def _book_id(raw: str) -> int:
    # Ids that do not parse can never match a stored book
    book_id = parse_int(raw)
    if book_id is None:
        raise BookNotFoundError()
    return book_id


@router.get("", response_model=BookPage)
def list_books(
    repo: Repo,
    search: Annotated[str | None, Query()] = None,
    genre: Annotated[str | None, Query()] = None,
    year: Annotated[str | None, Query()] = None,
    author: Annotated[str | None, Query()] = None,
    sort: Annotated[str | None, Query(description="title, author, year or newest")] = None,
    limit: Annotated[str | None, Query()] = None,
    offset: Annotated[str | None, Query()] = None,
):
    params = BookQuery(
        search=search,
        genre=genre,
        year=year,
        author=author,
        sort=sort,
        limit=limit,
        offset=offset,
    )
    return BookService.list_books(repo, params)


@router.post("/bulk", response_model=BulkCreateResult, status_code=HTTP_201_CREATED)
def bulk_create_books(
    repo: Repo,
    payload: Annotated[Any, Body()] = None,
):
    items = payload.get("books") if isinstance(payload, dict) else None
    return BookService.bulk_create(repo, items)


@router.get("/{book_id}", response_model=Book)
def get_book(book_id: str, repo: Repo):
    return BookService.get_book(repo, _book_id(book_id))


@router.post("", response_model=Book, status_code=HTTP_201_CREATED)
def create_book(data: BookCandidate, repo: Repo):
    return BookService.create_book(repo, data)


@router.put("/{book_id}", response_model=Book)
def update_book(book_id: str, data: BookCandidate, repo: Repo):
    return BookService.update_book(repo, _book_id(book_id), data)


@router.delete("/{book_id}", response_model=DeleteResult)
def delete_book(book_id: str, repo: Repo):
    return BookService.delete_book(repo, _book_id(book_id))
