"""
In-memory document collection.

Holds JSON-like documents in a list and answers equality queries by linear
scan. The method names and result objects follow the Mongo driver
(find, find_one, insert_one, update_one, delete_one) so repositories read
the same as they would against a real document store.

Every operation completes without awaiting, so concurrent requests on the
same event loop never observe a partial write.
"""

import copy
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

Document = Dict[str, Any]


@dataclass(frozen=True)
class InsertResult:
    inserted_id: Any


@dataclass(frozen=True)
class UpdateResult:
    matched_count: int
    modified_count: int

    @property
    def matched(self) -> bool:
        return self.matched_count > 0


@dataclass(frozen=True)
class DeleteResult:
    deleted_count: int

    @property
    def deleted(self) -> bool:
        return self.deleted_count > 0


def _matches(document: Document, query: Optional[Document]) -> bool:
    if not query:
        return True
    return all(key in document and document[key] == value for key, value in query.items())


class InMemoryCollection:
    """List-backed collection of documents with equality-match queries."""

    def __init__(self, name: str, documents: Optional[Iterable[Document]] = None):
        self.name = name
        self._documents: List[Document] = [copy.deepcopy(d) for d in documents or ()]

    def __len__(self) -> int:
        return len(self._documents)

    async def find(self, query: Optional[Document] = None) -> List[Document]:
        """
        Return copies of all documents matching every key of query.

        Args:
            query: Field/value pairs to match (all documents when empty)

        Returns:
            Matching documents in insertion order
        """
        return [copy.deepcopy(d) for d in self._documents if _matches(d, query)]

    async def find_one(self, query: Document) -> Optional[Document]:
        """Return a copy of the first matching document, or None."""
        for document in self._documents:
            if _matches(document, query):
                return copy.deepcopy(document)
        return None

    async def insert_one(self, document: Document) -> InsertResult:
        """Append a copy of document. No uniqueness constraint is enforced."""
        self._documents.append(copy.deepcopy(document))
        return InsertResult(inserted_id=document.get("id"))

    async def update_one(self, query: Document, set_fields: Document) -> UpdateResult:
        """Merge set_fields into the first matching document."""
        for document in self._documents:
            if _matches(document, query):
                modified = any(document.get(k) != v for k, v in set_fields.items())
                document.update(copy.deepcopy(set_fields))
                return UpdateResult(matched_count=1, modified_count=int(modified))
        return UpdateResult(matched_count=0, modified_count=0)

    async def delete_one(self, query: Document) -> DeleteResult:
        """Remove the first matching document."""
        for index, document in enumerate(self._documents):
            if _matches(document, query):
                del self._documents[index]
                return DeleteResult(deleted_count=1)
        return DeleteResult(deleted_count=0)
