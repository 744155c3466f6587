from __future__ import annotations

import json
import os
import tempfile
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from catalogue.core.errors import StoreError
from catalogue.core.logging import get_logger
from catalogue.models.book import Book, utcnow

_BOOK_LIST = TypeAdapter(list[Book])

logger = get_logger(__name__)


def sample_books() -> list[Book]:
    """The four books a fresh catalogue starts with."""
    now = utcnow()
    seed = [
        ("To Kill a Mockingbird", "Harper Lee", "Fiction", 1960,
         "A classic novel about racial injustice and moral growth in the American South.",
         "978-0-06-112008-4"),
        ("1984", "George Orwell", "Science Fiction", 1949,
         "A dystopian novel about totalitarianism and surveillance.",
         "978-0-452-28423-4"),
        ("Pride and Prejudice", "Jane Austen", "Romance", 1813,
         "A romantic novel about Elizabeth Bennet and Mr. Darcy.",
         "978-0-14-143951-8"),
        ("The Great Gatsby", "F. Scott Fitzgerald", "Fiction", 1925,
         "A story of decadence and excess in Jazz Age America.",
         "978-0-7432-7356-5"),
    ]
    return [
        Book(
            id=i,
            title=title,
            author=author,
            genre=genre,
            year=year,
            description=description,
            isbn=isbn,
            created_at=now,
            updated_at=now,
        )
        for i, (title, author, genre, year, description, isbn) in enumerate(seed, start=1)
    ]


class BookRepository:
    """
    The whole catalogue as one pretty-printed JSON array on disk.
    - Seeds sample books the first time the file is found missing
    - Reads the full collection on every call (no cache)
    - Replaces the file atomically on save
    """

    def __init__(self, path: str | os.PathLike[str], strict: bool = False):
        self.path: Path = Path(path)
        self.strict: bool = strict
        self._lock = threading.RLock()
        self._initialized = False

    # Create the file with sample data if it does not exist yet
    def initialize(self) -> None:
        with self._lock:
            if self._initialized:
                return
            if not self.path.exists():
                logger.info("Seeding book store at %s", self.path)
                self.save_all(sample_books())
            self._initialized = True

    # Load every book; missing or unparsable files read as empty
    def load_all(self) -> list[Book]:
        books, _ = self._read()
        return books

    def _read(self) -> tuple[list[Book], int]:
        """Return the valid books and how many stored records were rejected."""
        self.initialize()
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.warning("Book store %s is missing, using an empty catalogue", self.path)
            return [], 0
        except OSError as e:
            if self.strict:
                raise StoreError(f"Cannot read {self.path}") from e
            logger.error("Cannot read book store %s: %s", self.path, e)
            return [], 0

        try:
            records = json.loads(raw)
        except ValueError:
            records = None
        if not isinstance(records, list):
            if self.strict:
                raise StoreError(f"Corrupt book store {self.path}")
            logger.error(
                "Book store %s is not a JSON array, using an empty catalogue", self.path
            )
            return [], 0

        books: list[Book] = []
        rejected = 0
        for index, record in enumerate(records):
            try:
                books.append(Book.model_validate(record))
            except ValidationError as e:
                if self.strict:
                    raise StoreError(f"Invalid record {index} in {self.path}") from e
                logger.error(
                    "Skipping invalid record %d in book store %s: %s",
                    index,
                    self.path,
                    e.errors(include_url=False),
                )
                rejected += 1
        return books, rejected

    # Persist the full collection
    def save_all(self, books: Sequence[Book]) -> None:
        payload = json.dumps(
            _BOOK_LIST.dump_python(list(books), mode="json", by_alias=True),
            indent=2,
            ensure_ascii=False,
        )
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StoreError(f"Cannot write {self.path}") from e

    @contextmanager
    def writing(self) -> Iterator[list[Book]]:
        """
        Hold the store lock across load -> modify -> save.
        Yields the loaded collection; the caller saves it explicitly.
        Refuses to start while stored records fail validation, so a save
        never drops them.
        """
        with self._lock:
            books, rejected = self._read()
            if rejected:
                raise StoreError(
                    f"{rejected} invalid record(s) in {self.path}, refusing to write"
                )
            yield books

    @staticmethod
    # Next id: one past the largest existing id
    def next_id(books: Sequence[Book]) -> int:
        return max((b.id for b in books), default=0) + 1

    @staticmethod
    # Find a book by id
    def find(books: Sequence[Book], book_id: int) -> int | None:
        for index, book in enumerate(books):
            if book.id == book_id:
                return index
        return None

    @staticmethod
    # Check whether another book already uses this title + author
    def duplicate_exists(
        books: Sequence[Book], title: str, author: str, exclude_id: int | None = None
    ) -> bool:
        return any(
            b.same_work(title, author) for b in books if b.id != exclude_id
        )
