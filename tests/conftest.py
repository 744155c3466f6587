import pytest
import uuid
from fastapi.testclient import TestClient

from catalogue.main import app
from catalogue.db.store import get_book_repository
from catalogue.repos.book_repo import BookRepository


@pytest.fixture
def books_file(tmp_path):
    """Path of a not-yet-created JSON store inside a missing directory."""
    return tmp_path / "data" / "books.json"


@pytest.fixture
def repo(books_file):
    """Repository backed by the temporary file; seeds on first use."""
    return BookRepository(books_file)


@pytest.fixture
def empty_repo(tmp_path):
    """Repository over an existing, empty collection."""
    path = tmp_path / "empty.json"
    _ = path.write_text("[]", encoding="utf-8")
    return BookRepository(path)


@pytest.fixture
def test_client(repo):
    """Create a test client for FastAPI app using the temporary store."""
    app.dependency_overrides[get_book_repository] = lambda: repo
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_book(test_client):
    """Create a sample book for testing using the API."""
    unique_suffix = uuid.uuid4().hex[:8]

    book_data = {
        "title": f"Test Book {unique_suffix}",
        "author": "Test Author",
        "genre": "Mystery",
        "year": 2001,
        "description": "A book written for the test suite.",
        "isbn": "978-3-16-148410-0",
    }

    response = test_client.post("/api/books", json=book_data)

    assert response.status_code == 201, f"Failed to create sample book: {response.text}"
    return response.json()


@pytest.fixture
def headers_with_correlation():
    """HTTP headers with correlation ID."""
    return {"X-Request-ID": str(uuid.uuid4())}
