"""
Default data loaded into the in-memory stores at startup.

User passwords are kept in plain text here only long enough to be hashed
by the auth service when the user store is built.
"""

from typing import Callable, List

from books_api.src.repositories.book_repo import BookRepository
from books_api.src.repositories.collection import InMemoryCollection
from books_api.src.repositories.user_repo import UserRepository

DEFAULT_BOOKS: List[dict] = [
    {"id": 1, "title": "The Fellowship of the Ring", "author": "J.R.R. Tolkien"},
    {"id": 2, "title": "Harry Potter and the Philosopher's Stone", "author": "J.K. Rowling"},
    {"id": 3, "title": "The Two Towers", "author": "J.R.R. Tolkien"},
    {"id": 4, "title": "Harry Potter and the Chamber of Secrets", "author": "J.K. Rowling"},
    {"id": 5, "title": "The Return of the King", "author": "J.R.R. Tolkien"},
]

DEFAULT_USERS: List[dict] = [
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
        "id": 2,
        "email": "hermione@hogwarts.edu",
        "password": "granger",
        "security_questions": [
            {"question": "What is your pet's name?", "answer": "Crookshanks"},
            {"question": "What is your favorite book?", "answer": "Hogwarts: A History"},
            {"question": "What is your mother's maiden name?", "answer": "Wilkins"},
        ],
    },
    {
        "id": 3,
        "email": "ron@hogwarts.edu",
        "password": "weasley",
        "security_questions": [
            {"question": "What is your pet's name?", "answer": "Scabbers"},
            {"question": "What is your favorite book?", "answer": "The Quibbler"},
            {"question": "What is your mother's maiden name?", "answer": "Prewett"},
        ],
    },
]


def build_book_repository(books: List[dict] = DEFAULT_BOOKS) -> BookRepository:
    """Create a book repository holding the given book documents."""
    return BookRepository(InMemoryCollection("books", books))


def build_user_repository(
    hash_password: Callable[[str], str],
    users: List[dict] = DEFAULT_USERS,
) -> UserRepository:
    """
    Create a user repository from user fixtures with plain-text passwords.

    Args:
        hash_password: Function turning a plain password into a stored hash
        users: User fixtures with a "password" key

    Returns:
        Repository whose documents carry "password_hash" instead
    """
    documents = []
    for user in users:
        document = {k: v for k, v in user.items() if k != "password"}
        document["password_hash"] = hash_password(user["password"])
        documents.append(document)
    return UserRepository(InMemoryCollection("users", documents))
