"""
Unit tests for the in-memory document collection.

Tests cover:
- Equality-match queries
- Insert without uniqueness checks
- Update and delete result counts
- Isolation of stored documents from returned copies
"""

import pytest

from books_api.src.repositories.collection import InMemoryCollection


@pytest.fixture
def collection():
    return InMemoryCollection(
        "books",
        [
            {"id": 1, "title": "Book One", "author": "Author One"},
            {"id": 2, "title": "Book Two", "author": "Author Two"},
        ]
    )


class TestFind:
    """Tests for find and find_one."""

    @pytest.mark.asyncio
    async def test_find_without_query_returns_all(self, collection):
        """Test empty query matches every document in insertion order."""
        documents = await collection.find()
        assert [d["id"] for d in documents] == [1, 2]

    @pytest.mark.asyncio
    async def test_find_with_query_filters(self, collection):
        """Test query keys must all match."""
        documents = await collection.find({"author": "Author Two"})
        assert documents == [{"id": 2, "title": "Book Two", "author": "Author Two"}]

    @pytest.mark.asyncio
    async def test_find_one_missing_returns_none(self, collection):
        """Test find_one returns None when nothing matches."""
        assert await collection.find_one({"id": 99}) is None

    @pytest.mark.asyncio
    async def test_query_on_absent_key_does_not_match(self, collection):
        """Test a key missing from a document never matches."""
        assert await collection.find_one({"isbn": None}) is None

    @pytest.mark.asyncio
    async def test_returned_documents_are_copies(self, collection):
        """Test mutating a result does not change stored state."""
        document = await collection.find_one({"id": 1})
        document["title"] = "Changed"

        stored = await collection.find_one({"id": 1})
        assert stored["title"] == "Book One"


class TestWrites:
    """Tests for insert_one, update_one and delete_one."""

    @pytest.mark.asyncio
    async def test_insert_allows_duplicate_ids(self, collection):
        """Test insert does not enforce id uniqueness."""
        result = await collection.insert_one({"id": 1, "title": "Duplicate"})

        assert result.inserted_id == 1
        assert len(await collection.find({"id": 1})) == 2
        assert len(collection) == 3

    @pytest.mark.asyncio
    async def test_update_merges_fields(self, collection):
        """Test update merges set fields into the first match."""
        result = await collection.update_one({"id": 1}, {"title": "New Title"})

        assert result.matched_count == 1
        assert result.modified_count == 1
        assert result.matched
        assert await collection.find_one({"id": 1}) == {
            "id": 1, "title": "New Title", "author": "Author One"
        }

    @pytest.mark.asyncio
    async def test_update_with_same_values_matches_without_modifying(self, collection):
        """Test repeating an update still matches."""
        result = await collection.update_one({"id": 2}, {"title": "Book Two"})

        assert result.matched
        assert result.modified_count == 0

    @pytest.mark.asyncio
    async def test_update_without_match(self, collection):
        """Test update reports zero matches for an unknown id."""
        result = await collection.update_one({"id": 42}, {"title": "Nope"})

        assert result.matched_count == 0
        assert not result.matched

    @pytest.mark.asyncio
    async def test_delete_removes_first_match(self, collection):
        """Test delete removes a single document."""
        result = await collection.delete_one({"id": 1})

        assert result.deleted_count == 1
        assert result.deleted
        assert await collection.find_one({"id": 1}) is None
        assert len(collection) == 1

    @pytest.mark.asyncio
    async def test_delete_without_match(self, collection):
        """Test delete reports zero deletions for an unknown id."""
        result = await collection.delete_one({"id": 42})

        assert result.deleted_count == 0
        assert not result.deleted
