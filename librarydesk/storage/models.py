"""
Database models for Library Desk.
"""

from enum import Enum

from sqlalchemy import CheckConstraint, Column, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Role(str, Enum):
    """Account role; decides landing page and authorization."""
    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"


class User(Base):
    """User model for authentication."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=Role.STUDENT.value)


class BookModel(Base):
    """SQLAlchemy model for books."""

    __tablename__ = "books"

    isbn = Column(String(13), primary_key=True)

    book_name = Column(String(500), nullable=False, index=True)
    author_name = Column(String(500), nullable=False)
    publisher_name = Column(String(500), nullable=False)

    # Copies on the shelf vs. copies out on loan
    available = Column(Integer, nullable=False, default=0)
    borrowed = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("available >= 0", name="ck_books_available_non_negative"),
        CheckConstraint("borrowed >= 0", name="ck_books_borrowed_non_negative"),
    )
