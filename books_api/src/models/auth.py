"""
Authentication and user models.

Provides Pydantic schemas for:
- User records with hashed passwords and security questions
- Login and security-question requests
- Message responses
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr


# ============================================================================
# Domain Models
# ============================================================================


class SecurityQuestion(BaseModel):
    """Stored security question and its expected answer."""
    question: str = Field(
        ...,
        description="Question shown to the user"
    )
    answer: str = Field(
        ...,
        description="Expected answer (compared case-sensitively)"
    )


class UserDB(BaseModel):
    """
    User record as held by the user store.

    Users are read-only: there are no endpoints that create, update or
    delete them.
    """
    id: int = Field(
        ...,
        description="User ID"
    )
    email: str = Field(
        ...,
        description="Email address (unique lookup key)"
    )
    password_hash: str = Field(
        ...,
        description="BCrypt password hash"
    )
    security_questions: List[SecurityQuestion] = Field(
        default_factory=list,
        description="Ordered security questions"
    )

    def __repr__(self) -> str:
        """String representation without the password hash."""
        return f"<UserDB(id={self.id}, email='{self.email}')>"


# ============================================================================
# Pydantic Request Models
# ============================================================================


class LoginRequest(BaseModel):
    """
    Login request schema.

    Both fields are optional at the schema level; the handler rejects a
    request missing either one with its own message.
    """
    email: Optional[str] = Field(
        None,
        description="Email address"
    )
    password: Optional[str] = Field(
        None,
        description="Password"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "email": "test@example.com",
                "password": "password123"
            }
        }
    }


class SecurityAnswer(BaseModel):
    """One submitted answer. No properties other than `answer` are allowed."""
    answer: StrictStr

    model_config = ConfigDict(extra="forbid")


class SecurityAnswersRequest(BaseModel):
    """Verify security questions request schema."""
    answers: List[SecurityAnswer] = Field(
        ...,
        description="Answers in the same order as the stored questions"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "answers": [
                    {"answer": "Fluffy"},
                    {"answer": "The Great Gatsby"},
                    {"answer": "Smith"}
                ]
            }
        }
    }


# ============================================================================
# Pydantic Response Models
# ============================================================================


class MessageResponse(BaseModel):
    """Message response schema used by the auth routes."""
    message: str = Field(
        ...,
        min_length=1,
        description="Outcome message"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "message": "Authentication successful"
            }
        }
    }
