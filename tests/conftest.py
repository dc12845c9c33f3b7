"""
Shared fixtures for unit and integration tests.

Every test gets its own stores and application instance, so state never
leaks between tests. BCrypt runs with the minimum round count to keep
hashing fast.
"""

import pytest
from fastapi.testclient import TestClient

from books_api.src.config import Settings
from books_api.src.main import create_app
from books_api.src.repositories.seed import build_book_repository, build_user_repository
from books_api.src.services.auth_service import AuthService, build_password_context


TEST_BOOKS = [
    {"id": 1, "title": "Book One", "author": "Author One"},
    {"id": 2, "title": "Book Two", "author": "Author Two"},
]

TEST_USERS = [
    {
        "id": 1,
        "email": "harry@hogwarts.edu",
        "password": "potter",
        "security_questions": [
            {"question": "What is your pet's name?", "answer": "Hedwig"},
            {"question": "What is your favorite book?", "answer": "Quidditch Through the Ages"},
            {"question": "What is your mother's maiden name?", "answer": "Evans"},
        ],
    },
    {
        "id": 4,
        "email": "test@example.com",
        "password": "password123",
        "security_questions": [
            {"question": "What is your pet's name?", "answer": "Fluffy"},
            {"question": "What is your favorite book?", "answer": "The Great Gatsby"},
            {"question": "What is your mother's maiden name?", "answer": "Smith"},
        ],
    },
]


def make_settings(**overrides) -> Settings:
    """Settings for tests, ignoring any .env file on the machine."""
    values = {
        "environment": "production",
        "password_bcrypt_rounds": 4,
        "log_level": "WARNING",
        "log_format": "text",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def settings_factory():
    return make_settings


@pytest.fixture
def pwd_context():
    return build_password_context(4)


@pytest.fixture
def book_repo():
    return build_book_repository(TEST_BOOKS)


@pytest.fixture
def user_repo(pwd_context):
    return build_user_repository(pwd_context.hash, TEST_USERS)


@pytest.fixture
def auth_service(user_repo, settings, pwd_context):
    return AuthService(user_repo, settings=settings, pwd_context=pwd_context)


@pytest.fixture
def app(settings, book_repo, user_repo):
    return create_app(settings=settings, book_repo=book_repo, user_repo=user_repo)


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)
