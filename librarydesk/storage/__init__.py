"""
Storage Module for Library Desk

Relational storage for the two persisted tables:
- users: credential store
- books: inventory keyed by ISBN
"""

from librarydesk.storage.database import Database
from librarydesk.storage.models import Base, BookModel, Role, User
from librarydesk.storage.book_repository import (
    BookRepository,
    StoredBook,
)
from librarydesk.storage.user_repository import (
    UserRepository,
    StoredUser,
)

__all__ = [
    "Database",
    # Models
    "Base",
    "BookModel",
    "Role",
    "User",
    # Book Repository
    "BookRepository",
    "StoredBook",
    # User Repository
    "UserRepository",
    "StoredUser",
]
