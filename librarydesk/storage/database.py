"""
Engine and session factory shared by the repositories.
"""

from contextlib import contextmanager
from typing import Iterator

from loguru import logger
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from librarydesk.errors import StoreError
from librarydesk.storage.models import Base


class Database:
    """
    Owns the SQLAlchemy engine for one database URL.

    Tables are created on construction. SQLite URLs are opened with
    ``check_same_thread=False`` because FastAPI runs sync routes in a
    thread pool; in-memory SQLite additionally shares one connection.
    """

    def __init__(self, database_url: str = "sqlite:///:memory:", echo: bool = False):
        # Strip async drivers for sync engine
        self.database_url = database_url.replace("+aiosqlite", "").replace("+asyncpg", "")

        engine_kwargs = {"echo": echo}
        if self.database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in self.database_url or self.database_url == "sqlite://":
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_pre_ping"] = True

        self.engine = create_engine(self.database_url, **engine_kwargs)
        Base.metadata.create_all(self.engine)

        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

        logger.info(f"Database initialized: {self.database_url[:50]}...")

    def get_session(self) -> Session:
        """Get database session."""
        return self.SessionLocal()

    @contextmanager
    def session_scope(self, operation: str) -> Iterator[Session]:
        """
        Session for one repository call.

        Commits on success; driver failures are rolled back and re-raised
        as StoreError tagged with ``operation``.
        """
        session = self.get_session()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Store failure during {operation}: {e}")
            raise StoreError(operation, detail=str(e)) from e
        finally:
            session.close()

    def ping(self) -> bool:
        """Run a trivial query; used by the health endpoint."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    def dispose(self) -> None:
        self.engine.dispose()
