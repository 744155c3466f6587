from pydantic import BaseModel, field_validator
from typing import Any

from catalogue.models.book import Book


# Book candidate: the writable fields of a create/update request.
# Every field is optional so all rule violations are reported together.
class BookCandidate(BaseModel):
    title: str | None = None
    author: str | None = None
    genre: str | None = None
    year: int | None = None
    description: str | None = None
    isbn: str | None = None

    @field_validator("year", mode="before")
    @classmethod
    def blank_year_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


# List filters; every value arrives as an optional query string
class BookQuery(BaseModel):
    search: str | None = None
    genre: str | None = None
    year: str | None = None
    author: str | None = None
    sort: str | None = None
    limit: str | None = None
    offset: str | None = None


# One page of list results
class BookPage(BaseModel):
    books: list[Book]
    total: int
    count: int


class DeleteResult(BaseModel):
    message: str
    book: Book


class BulkItemError(BaseModel):
    index: int
    errors: list[str]


class BulkCreateResult(BaseModel):
    success: list[Book] = []
    errors: list[BulkItemError] = []
