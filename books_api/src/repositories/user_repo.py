"""
User repository.

Read-only lookups of users held in an in-memory document collection.
"""

import structlog
from typing import Optional

from books_api.src.models.auth import UserDB
from books_api.src.repositories.collection import InMemoryCollection

logger = structlog.get_logger(__name__)


class UserRepository:
    """Repository for user lookups."""

    def __init__(self, collection: Optional[InMemoryCollection] = None):
        """
        Initialize user repository.

        Args:
            collection: Backing collection (a fresh empty one when omitted)
        """
        self.collection = collection if collection is not None else InMemoryCollection("users")

    async def get_user_by_email(self, email: str) -> Optional[UserDB]:
        """
        Get user by email.

        Args:
            email: Email address

        Returns:
            User or None if not found
        """
        try:
            document = await self.collection.find_one({"email": email})

            if not document:
                logger.debug("user_not_found", email=email)
                return None

            return UserDB.model_validate(document)

        except Exception as e:
            logger.error("user_get_by_email_failed", error=str(e), email=email)
            raise
