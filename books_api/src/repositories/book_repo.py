"""
Book repository.

Provides async CRUD operations for books on top of an in-memory document
collection. Records are returned as Book models; store failures are logged
and re-raised for the route to map to a server error.
"""

import structlog
from typing import List, Optional

from books_api.src.models.book import Book
from books_api.src.repositories.collection import (
    DeleteResult,
    InMemoryCollection,
    UpdateResult,
)

logger = structlog.get_logger(__name__)


class BookRepository:
    """Repository for book store operations."""

    def __init__(self, collection: Optional[InMemoryCollection] = None):
        """
        Initialize book repository.

        Args:
            collection: Backing collection (a fresh empty one when omitted)
        """
        self.collection = collection if collection is not None else InMemoryCollection("books")

    async def find_all(self) -> List[Book]:
        """
        Get all books.

        Returns:
            Every stored book, possibly empty
        """
        try:
            documents = await self.collection.find()
            return [Book.model_validate(d) for d in documents]
        except Exception as e:
            logger.error("book_find_all_failed", error=str(e))
            raise

    async def find_by_id(self, book_id: int) -> Optional[Book]:
        """
        Get book by ID.

        Args:
            book_id: Book ID

        Returns:
            Book or None if not found
        """
        try:
            document = await self.collection.find_one({"id": book_id})
            if not document:
                logger.debug("book_not_found", book_id=book_id)
                return None
            return Book.model_validate(document)
        except Exception as e:
            logger.error("book_find_by_id_failed", error=str(e), book_id=book_id)
            raise

    async def insert(self, book: Book) -> Book:
        """
        Insert a book. Duplicate ids are not rejected.

        Args:
            book: Book to store

        Returns:
            The stored book
        """
        try:
            await self.collection.insert_one(book.model_dump())
            logger.info("book_created", book_id=book.id)
            return book
        except Exception as e:
            logger.error("book_create_failed", error=str(e), book_id=book.id)
            raise

    async def update_where(self, book_id: int, title: str, author: Optional[str]) -> UpdateResult:
        """
        Replace title and author of the book with the given ID.

        Args:
            book_id: Book ID
            title: New title
            author: New author (None clears it)

        Returns:
            Update result; `matched` is False when no book has this ID
        """
        try:
            result = await self.collection.update_one(
                {"id": book_id},
                {"id": book_id, "title": title, "author": author}
            )
            if result.matched:
                logger.info("book_updated", book_id=book_id)
            return result
        except Exception as e:
            logger.error("book_update_failed", error=str(e), book_id=book_id)
            raise

    async def delete_where(self, book_id: int) -> DeleteResult:
        """
        Delete the book with the given ID.

        Args:
            book_id: Book ID

        Returns:
            Delete result; `deleted` is False when no book has this ID
        """
        try:
            result = await self.collection.delete_one({"id": book_id})
            if result.deleted:
                logger.info("book_deleted", book_id=book_id)
            return result
        except Exception as e:
            logger.error("book_delete_failed", error=str(e), book_id=book_id)
            raise
