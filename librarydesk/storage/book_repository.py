"""
Book Repository for Library Desk

Structured storage for the books inventory using SQLAlchemy:
- SQLite for development/testing
- Any SQLAlchemy URL in production

Design Decisions:
1. ISBN is the primary key: one row per title edition
2. Every mutation is a single UPDATE/INSERT/DELETE statement
3. Counter changes are expressed in SQL (available = available + n),
   never read-modify-write in Python
4. Mutators return the affected row count so callers can tell a
   no-op from a change
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger
from sqlalchemy import delete, func, insert, select, update

from librarydesk.storage.database import Database
from librarydesk.storage.models import BookModel


@dataclass
class StoredBook:
    """Data class for book data transfer."""

    isbn: str
    book_name: str
    author_name: str
    publisher_name: str
    available: int = 0
    borrowed: int = 0

    @classmethod
    def from_model(cls, model: BookModel) -> "StoredBook":
        """Create from SQLAlchemy model."""
        return cls(
            isbn=model.isbn,
            book_name=model.book_name,
            author_name=model.author_name,
            publisher_name=model.publisher_name,
            available=model.available or 0,
            borrowed=model.borrowed or 0,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "isbn": self.isbn,
            "book_name": self.book_name,
            "author_name": self.author_name,
            "publisher_name": self.publisher_name,
            "available": self.available,
            "borrowed": self.borrowed,
        }


class BookRepository:
    """
    Repository for the books table.

    Usage:
        repo = BookRepository(Database("sqlite:///./library.db"))

        repo.create(
            isbn="9780441172719",
            book_name="Dune",
            author_name="Frank Herbert",
            publisher_name="Chilton Books",
            available=3,
        )
        repo.increment_available("9780441172719", 2)
    """

    def __init__(self, database: Database):
        self.database = database

    def get_by_isbn(self, isbn: str) -> Optional[StoredBook]:
        """
        Get book by ISBN.

        Args:
            isbn: 13-digit ISBN

        Returns:
            StoredBook or None
        """
        with self.database.session_scope("get book") as session:
            book = session.execute(
                select(BookModel).where(BookModel.isbn == isbn)
            ).scalar_one_or_none()

            if book:
                return StoredBook.from_model(book)
            return None

    def create(
        self,
        isbn: str,
        book_name: str,
        author_name: str,
        publisher_name: str,
        available: int,
        borrowed: int = 0,
    ) -> StoredBook:
        """Insert a new book row."""
        with self.database.session_scope("create book") as session:
            session.execute(
                insert(BookModel).values(
                    isbn=isbn,
                    book_name=book_name,
                    author_name=author_name,
                    publisher_name=publisher_name,
                    available=available,
                    borrowed=borrowed,
                )
            )

        logger.info(f"Created book {isbn} with {available} available")
        return StoredBook(
            isbn=isbn,
            book_name=book_name,
            author_name=author_name,
            publisher_name=publisher_name,
            available=available,
            borrowed=borrowed,
        )

    def increment_available(self, isbn: str, quantity: int) -> int:
        """
        Add ``quantity`` to the available counter.

        Returns:
            Number of rows updated (0 when the ISBN is unknown)
        """
        with self.database.session_scope("increment available") as session:
            result = session.execute(
                update(BookModel)
                .where(BookModel.isbn == isbn)
                .values(available=BookModel.available + quantity)
            )
            return result.rowcount

    def decrement_available(self, isbn: str, quantity: int) -> int:
        """
        Subtract ``quantity`` from the available counter.

        The statement only matches while ``available >= quantity`` so the
        counter cannot go negative.

        Returns:
            Number of rows updated
        """
        with self.database.session_scope("decrement available") as session:
            result = session.execute(
                update(BookModel)
                .where(BookModel.isbn == isbn, BookModel.available >= quantity)
                .values(available=BookModel.available - quantity)
            )
            return result.rowcount

    def set_available(self, isbn: str, available: int) -> int:
        """Overwrite the available counter."""
        with self.database.session_scope("set available") as session:
            result = session.execute(
                update(BookModel)
                .where(BookModel.isbn == isbn)
                .values(available=available)
            )
            return result.rowcount

    def delete(self, isbn: str) -> int:
        """
        Hard-delete a book row.

        Returns:
            Number of rows deleted (0 if already gone)
        """
        with self.database.session_scope("delete book") as session:
            result = session.execute(delete(BookModel).where(BookModel.isbn == isbn))
            return result.rowcount

    def list_all(self) -> list[StoredBook]:
        """All books ordered by name."""
        with self.database.session_scope("list books") as session:
            books = session.execute(
                select(BookModel).order_by(BookModel.book_name.asc())
            ).scalars().all()

            return [StoredBook.from_model(b) for b in books]

    def get_stats(self) -> dict:
        """
        Inventory totals for the admin dashboard.

        Returns:
            Statistics dictionary
        """
        with self.database.session_scope("book stats") as session:
            titles, available, borrowed = session.execute(
                select(
                    func.count(BookModel.isbn),
                    func.coalesce(func.sum(BookModel.available), 0),
                    func.coalesce(func.sum(BookModel.borrowed), 0),
                )
            ).one()

            return {
                "total_titles": titles,
                "total_available": available,
                "total_borrowed": borrowed,
            }
