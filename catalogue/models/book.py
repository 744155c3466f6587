from datetime import datetime, timezone
from typing import ClassVar
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_GENRE = "Other"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


#Book
class Book(BaseModel):
    """A persisted catalogue entry, stored and served with camelCase keys."""

    id: int = Field(gt=0)
    title: str
    author: str
    genre: str = DEFAULT_GENRE
    year: int | None = None
    description: str = ""
    isbn: str = ""
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=utcnow, alias="updatedAt")

    model_config: ClassVar[ConfigDict] = ConfigDict(populate_by_name=True)

    def same_work(self, title: str, author: str) -> bool:
        """True when ``title``/``author`` collide with this book, ignoring case."""
        return (
            self.title.strip().lower() == title.strip().lower()
            and self.author.strip().lower() == author.strip().lower()
        )
