"""
Authentication service for password and security-question checks.

Provides:
- Password hashing and verification (passlib + bcrypt)
- Credential checks by email and password
- Positional security-answer verification

Passwords and answers are never written to the log.
"""

import hmac
import structlog
from enum import Enum
from typing import List, Optional

from passlib.context import CryptContext

from books_api.src.config import Settings, get_settings
from books_api.src.models.auth import UserDB
from books_api.src.repositories.user_repo import UserRepository
from shared.metrics import AuthMetrics

logger = structlog.get_logger(__name__)


class SecurityCheckResult(str, Enum):
    """Outcome of a security-question verification."""

    VERIFIED = "verified"
    USER_NOT_FOUND = "user_not_found"
    COUNT_MISMATCH = "count_mismatch"
    INCORRECT = "incorrect"


def build_password_context(rounds: int) -> CryptContext:
    """Create the bcrypt hashing context used for stored passwords."""
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=rounds
    )


class AuthService:
    """Service for authentication operations."""

    def __init__(
        self,
        user_repo: UserRepository,
        settings: Optional[Settings] = None,
        metrics: Optional[AuthMetrics] = None,
        pwd_context: Optional[CryptContext] = None
    ):
        """
        Initialize auth service.

        Args:
            user_repo: User repository
            settings: Application settings (cached settings when omitted)
            metrics: Authentication metrics (not recorded when omitted)
            pwd_context: Hashing context (built from settings when omitted)
        """
        self.user_repo = user_repo
        self.settings = settings or get_settings()
        self.metrics = metrics
        self.pwd_context = pwd_context or build_password_context(
            self.settings.password_bcrypt_rounds
        )

    def hash_password(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password
        """
        try:
            hashed = self.pwd_context.hash(password)
            logger.debug("password_hashed")
            return hashed
        except Exception as e:
            logger.error("password_hash_failed", error=str(e))
            raise

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        Args:
            plain_password: Plain text password
            hashed_password: Hashed password

        Returns:
            True if password matches, False otherwise

        Raises:
            ValueError: If the stored hash is malformed
        """
        try:
            verified = self.pwd_context.verify(plain_password, hashed_password)
            logger.debug("password_verified", verified=verified)
            return verified
        except Exception as e:
            logger.error("password_verify_failed", error=str(e))
            raise

    async def authenticate_user(self, email: str, password: str) -> Optional[UserDB]:
        """
        Authenticate user with email and password.

        An unknown email and a wrong password both return None so callers
        cannot tell them apart.

        Args:
            email: Email address
            password: Plain text password

        Returns:
            User if authenticated, None otherwise
        """
        user = await self.user_repo.get_user_by_email(email)

        if not user:
            logger.warning("authentication_failed_user_not_found", email=email)
            self._record("password", "rejected")
            return None

        if not self.verify_password(password, user.password_hash):
            logger.warning("authentication_failed_invalid_password", email=email)
            self._record("password", "rejected")
            return None

        logger.info("user_authenticated", user_id=user.id, email=user.email)
        self._record("password", "accepted")
        return user

    async def verify_security_answers(self, email: str, answers: List[str]) -> SecurityCheckResult:
        """
        Compare submitted answers with the user's stored answers.

        Answers are compared position by position and case-sensitively.
        Every position is compared even after a mismatch.

        Args:
            email: Email address of the user
            answers: Submitted answers in question order

        Returns:
            Verification outcome
        """
        user = await self.user_repo.get_user_by_email(email)

        if not user:
            logger.warning("security_check_failed_user_not_found", email=email)
            self._record("security_questions", "user_not_found")
            return SecurityCheckResult.USER_NOT_FOUND

        expected = [q.answer for q in user.security_questions]
        if len(expected) != len(answers):
            logger.warning(
                "security_check_failed_count_mismatch",
                email=email,
                expected_count=len(expected),
                submitted_count=len(answers)
            )
            self._record("security_questions", "count_mismatch")
            return SecurityCheckResult.COUNT_MISMATCH

        matches = [
            hmac.compare_digest(submitted.encode("utf-8"), stored.encode("utf-8"))
            for submitted, stored in zip(answers, expected)
        ]
        if not all(matches):
            logger.warning("security_check_failed_incorrect_answers", email=email)
            self._record("security_questions", "incorrect")
            return SecurityCheckResult.INCORRECT

        logger.info("security_questions_verified", user_id=user.id, email=user.email)
        self._record("security_questions", "verified")
        return SecurityCheckResult.VERIFIED

    def _record(self, check: str, outcome: str) -> None:
        if self.metrics is not None:
            self.metrics.attempts.labels(check=check, outcome=outcome).inc()
