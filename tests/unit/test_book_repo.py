"""
Unit tests for the book repository.
"""

import pytest

from books_api.src.models.book import Book
from books_api.src.repositories.book_repo import BookRepository
from books_api.src.repositories.collection import InMemoryCollection


class FailingCollection(InMemoryCollection):
    """Collection whose reads always fail."""

    async def find(self, query=None):
        raise RuntimeError("store offline")


class TestBookRepository:
    """Tests for BookRepository operations."""

    @pytest.mark.asyncio
    async def test_find_all_returns_books(self, book_repo):
        """Test all stored documents come back as Book models."""
        books = await book_repo.find_all()

        assert all(isinstance(b, Book) for b in books)
        assert [b.id for b in books] == [1, 2]

    @pytest.mark.asyncio
    async def test_find_all_on_empty_store(self):
        """Test an empty store yields an empty list."""
        assert await BookRepository().find_all() == []

    @pytest.mark.asyncio
    async def test_find_by_id(self, book_repo):
        """Test lookup by id."""
        book = await book_repo.find_by_id(2)
        assert book == Book(id=2, title="Book Two", author="Author Two")

    @pytest.mark.asyncio
    async def test_find_by_id_missing(self, book_repo):
        """Test lookup of an unknown id returns None."""
        assert await book_repo.find_by_id(3) is None

    @pytest.mark.asyncio
    async def test_insert_then_find(self, book_repo):
        """Test an inserted book can be fetched."""
        book = Book(id=3, title="Book Three", author="Author Three")

        assert await book_repo.insert(book) == book
        assert await book_repo.find_by_id(3) == book

    @pytest.mark.asyncio
    async def test_update_where_replaces_title_and_author(self, book_repo):
        """Test update replaces both title and author."""
        result = await book_repo.update_where(1, "Updated Book", None)

        assert result.matched
        assert await book_repo.find_by_id(1) == Book(id=1, title="Updated Book")

    @pytest.mark.asyncio
    async def test_update_where_unknown_id(self, book_repo):
        """Test update of an unknown id does not match."""
        result = await book_repo.update_where(9, "Title", "Author")
        assert not result.matched

    @pytest.mark.asyncio
    async def test_delete_where(self, book_repo):
        """Test delete removes the book."""
        assert (await book_repo.delete_where(1)).deleted
        assert not (await book_repo.delete_where(1)).deleted

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self):
        """Test store errors are re-raised to the caller."""
        repo = BookRepository(FailingCollection("books"))

        with pytest.raises(RuntimeError, match="store offline"):
            await repo.find_all()
