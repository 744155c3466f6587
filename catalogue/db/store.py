from functools import lru_cache

from catalogue.core.config import settings
from catalogue.repos.book_repo import BookRepository


# One repository per process so its write lock is shared by every request.
@lru_cache()
def get_book_repository() -> BookRepository:
    """
    FastAPI dependency for the configured JSON book store.
    """
    return BookRepository(settings.BOOKS_FILE, strict=settings.STRICT_STORE)
