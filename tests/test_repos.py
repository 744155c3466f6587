import json
import threading
import pytest

from catalogue.core.errors import StoreError
from catalogue.models.book import Book
from catalogue.repos.book_repo import BookRepository, sample_books


class TestBookRepository:
    """Test the JSON file store."""

    def test_seeds_missing_file_and_directory(self, repo, books_file):
        """Test first use creates the directory and the four sample books."""
        assert not books_file.parent.exists()

        books = repo.load_all()

        assert books_file.exists()
        assert [(b.title, b.author, b.genre, b.year) for b in books] == [
            ("To Kill a Mockingbird", "Harper Lee", "Fiction", 1960),
            ("1984", "George Orwell", "Science Fiction", 1949),
            ("Pride and Prejudice", "Jane Austen", "Romance", 1813),
            ("The Great Gatsby", "F. Scott Fitzgerald", "Fiction", 1925),
        ]

    def test_existing_file_is_not_reseeded(self, empty_repo):
        assert empty_repo.load_all() == []

    def test_file_removed_after_first_use_reads_empty(self, repo, books_file):
        repo.load_all()
        books_file.unlink()

        assert repo.load_all() == []

    def test_corrupt_file_reads_empty(self, tmp_path):
        path = tmp_path / "books.json"
        _ = path.write_text("{not json", encoding="utf-8")

        assert BookRepository(path).load_all() == []

    def test_wrong_shape_reads_empty(self, tmp_path):
        path = tmp_path / "books.json"
        _ = path.write_text(json.dumps({"books": []}), encoding="utf-8")

        assert BookRepository(path).load_all() == []

    def test_invalid_record_is_skipped_on_read(self, repo, books_file):
        """Test one bad record does not hide the rest of the catalogue."""
        repo.initialize()
        records = json.loads(books_file.read_text(encoding="utf-8"))
        del records[0]["title"]
        _ = books_file.write_text(json.dumps(records), encoding="utf-8")

        assert [b.id for b in repo.load_all()] == [2, 3, 4]

    def test_invalid_record_blocks_writes(self, repo, books_file):
        """Test writing() refuses to start so the bad record is never dropped."""
        repo.initialize()
        records = json.loads(books_file.read_text(encoding="utf-8"))
        del records[0]["title"]
        _ = books_file.write_text(json.dumps(records), encoding="utf-8")

        with pytest.raises(StoreError):
            with repo.writing():
                pytest.fail("writing() should not yield")

        assert json.loads(books_file.read_text(encoding="utf-8")) == records

    def test_invalid_record_strict_raises(self, repo, books_file):
        repo.initialize()
        _ = books_file.write_text(json.dumps([{"id": 1}]), encoding="utf-8")
        repo.strict = True

        with pytest.raises(StoreError):
            repo.load_all()

    def test_corrupt_file_strict_raises(self, tmp_path):
        path = tmp_path / "books.json"
        _ = path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StoreError):
            BookRepository(path, strict=True).load_all()

    def test_save_writes_pretty_camel_case_json(self, empty_repo):
        book = sample_books()[0]
        empty_repo.save_all([book])

        text = empty_repo.path.read_text(encoding="utf-8")
        raw = json.loads(text)

        assert text.startswith('[\n  {\n    "id": 1,')
        assert set(raw[0]) == {
            "id",
            "title",
            "author",
            "genre",
            "year",
            "description",
            "isbn",
            "createdAt",
            "updatedAt",
        }

    def test_save_then_load_round_trip(self, empty_repo):
        books = sample_books()
        empty_repo.save_all(books)

        assert empty_repo.load_all() == books

    def test_save_leaves_no_temp_files(self, empty_repo):
        empty_repo.save_all(sample_books())

        assert [p.name for p in empty_repo.path.parent.iterdir()] == [empty_repo.path.name]

    def test_save_failure_raises_store_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        _ = blocker.write_text("", encoding="utf-8")
        repo = BookRepository(blocker / "books.json")

        with pytest.raises(StoreError):
            repo.save_all(sample_books())

    def test_next_id(self):
        books = sample_books()
        assert BookRepository.next_id([]) == 1
        assert BookRepository.next_id(books) == 5
        assert BookRepository.next_id([books[0], books[3]]) == 5

    def test_find(self):
        books = sample_books()
        assert BookRepository.find(books, 3) == 2
        assert BookRepository.find(books, 42) is None

    def test_duplicate_exists(self):
        books = sample_books()
        assert BookRepository.duplicate_exists(books, "1984", "GEORGE ORWELL")
        assert BookRepository.duplicate_exists(books, " 1984 ", "George Orwell")
        assert not BookRepository.duplicate_exists(books, "1984", "George Orwell", exclude_id=2)
        assert not BookRepository.duplicate_exists(books, "1985", "George Orwell")

    def test_concurrent_writers_do_not_lose_updates(self, repo):
        """Test load-modify-save cycles under writing() are serialized."""
        repo.initialize()

        def add(n: int) -> None:
            with repo.writing() as books:
                books.append(
                    Book(id=repo.next_id(books), title=f"Threaded {n}", author="Worker")
                )
                repo.save_all(books)

        threads = [threading.Thread(target=add, args=(n,)) for n in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        books = repo.load_all()
        ids = [b.id for b in books]
        assert len(books) == 24
        assert len(set(ids)) == 24
