"""
User repository: the credential store behind signup, login and the
member directory.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger
from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.exc import IntegrityError

from librarydesk.errors import ConflictError
from librarydesk.storage.database import Database
from librarydesk.storage.models import User


@dataclass
class StoredUser:
    """Data class for user data transfer."""

    id: int
    name: str
    email: str
    role: str
    password_hash: str = ""

    @classmethod
    def from_model(cls, model: User) -> "StoredUser":
        return cls(
            id=model.id,
            name=model.name,
            email=model.email,
            role=model.role,
            password_hash=model.password_hash,
        )

    def to_dict(self) -> dict:
        """Public fields only; the hash never leaves the repository layer."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
        }


class UserRepository:
    """Repository for the users table."""

    def __init__(self, database: Database):
        self.database = database

    def create(self, name: str, email: str, password_hash: str, role: str) -> StoredUser:
        """
        Insert a user.

        Raises:
            ConflictError: email already registered
        """
        with self.database.session_scope("create user") as session:
            user = User(name=name, email=email, password_hash=password_hash, role=role)
            session.add(user)
            try:
                session.flush()
            except IntegrityError as e:
                session.rollback()
                logger.warning(f"Signup rejected, duplicate email: {email}")
                raise ConflictError(
                    "Error: Could not create user. The email may already be registered.",
                    detail=str(e.orig),
                ) from e

            stored = StoredUser.from_model(user)

        logger.info(f"Created user {stored.id} ({stored.role})")
        return stored

    def get_by_email(self, email: str) -> Optional[StoredUser]:
        """Exact-match lookup by email."""
        with self.database.session_scope("get user") as session:
            user = session.execute(
                select(User).where(User.email == email)
            ).scalar_one_or_none()

            if user:
                return StoredUser.from_model(user)
            return None

    def list_all(self) -> list[StoredUser]:
        """All users ordered by ascending id."""
        with self.database.session_scope("list users") as session:
            users = session.execute(select(User).order_by(User.id.asc())).scalars().all()
            return [StoredUser.from_model(u) for u in users]

    def search(self, query: str) -> list[StoredUser]:
        """
        Case-insensitive substring match over id, email, role and name.

        An empty query matches every user. ``%`` and ``_`` in the query
        are matched literally.
        """
        needle = query.lower()

        with self.database.session_scope("search users") as session:
            stmt = select(User)
            if needle:
                stmt = stmt.where(
                    or_(
                        cast(User.id, String).contains(needle, autoescape=True),
                        func.lower(User.email).contains(needle, autoescape=True),
                        func.lower(User.role).contains(needle, autoescape=True),
                        func.lower(User.name).contains(needle, autoescape=True),
                    )
                )
            users = session.execute(stmt.order_by(User.id.asc())).scalars().all()

            return [StoredUser.from_model(u) for u in users]
