from .book_repo import BookRepository, sample_books

__all__ = ["BookRepository", "sample_books"]
