"""
Dependency injection for FastAPI routes.

Provides injectable dependencies for:
- Configuration
- Service instances (repositories, workflows, session store)
- The active session
- Role guards
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Union

from fastapi import Depends, Request

from librarydesk.errors import ForbiddenError
from librarydesk.sessions import ActiveSession
from librarydesk.storage.models import Role
from librarydesk.workflows.access import has_role


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class Settings:
    """Application settings loaded from environment."""

    # Database
    database_url: str = "sqlite:///./library.db"
    database_echo: bool = False

    # Sessions
    session_cookie_name: str = "library_session"
    session_max_age_seconds: int = 24 * 60 * 60
    session_cookie_secure: bool = False

    # Password hashing (bcrypt cost factor)
    password_hash_rounds: int = 10

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Environment
    environment: str = "development"
    debug: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            database_echo=os.getenv("DATABASE_ECHO", "false").lower() == "true",
            session_cookie_name=os.getenv("SESSION_COOKIE_NAME", cls.session_cookie_name),
            session_max_age_seconds=int(os.getenv("SESSION_MAX_AGE_SECONDS", cls.session_max_age_seconds)),
            session_cookie_secure=os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true",
            password_hash_rounds=int(os.getenv("PASSWORD_HASH_ROUNDS", cls.password_hash_rounds)),
            host=os.getenv("HOST", cls.host),
            port=int(os.getenv("PORT", cls.port)),
            environment=os.getenv("LIBRARY_ENV", cls.environment),
            debug=os.getenv("DEBUG", "true").lower() == "true",
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings.from_env()


# =============================================================================
# Service Container (Lazy Loading)
# =============================================================================

class ServiceContainer:
    """
    Container for lazy-loaded service instances.

    Services are initialized on first access to avoid startup delays.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._database = None
        self._book_repository = None
        self._user_repository = None
        self._password_hasher = None
        self._session_store = None
        self._auth_workflow = None
        self._inventory_workflow = None
        self._member_directory = None

    @property
    def database(self):
        """Get database (engine + session factory)."""
        if self._database is None:
            from ..storage.database import Database
            self._database = Database(
                self.settings.database_url,
                echo=self.settings.database_echo,
            )
        return self._database

    @property
    def book_repository(self):
        """Get book repository instance."""
        if self._book_repository is None:
            from ..storage.book_repository import BookRepository
            self._book_repository = BookRepository(self.database)
        return self._book_repository

    @property
    def user_repository(self):
        """Get user repository instance."""
        if self._user_repository is None:
            from ..storage.user_repository import UserRepository
            self._user_repository = UserRepository(self.database)
        return self._user_repository

    @property
    def password_hasher(self):
        if self._password_hasher is None:
            from ..security import PasswordHasher
            self._password_hasher = PasswordHasher(rounds=self.settings.password_hash_rounds)
        return self._password_hasher

    @property
    def session_store(self):
        """Get session store instance."""
        if self._session_store is None:
            from ..sessions import SessionStore
            self._session_store = SessionStore(
                max_age_seconds=self.settings.session_max_age_seconds,
            )
        return self._session_store

    @property
    def auth_workflow(self):
        if self._auth_workflow is None:
            from ..workflows.auth import AuthWorkflow
            self._auth_workflow = AuthWorkflow(
                users=self.user_repository,
                hasher=self.password_hasher,
            )
        return self._auth_workflow

    @property
    def inventory_workflow(self):
        if self._inventory_workflow is None:
            from ..workflows.inventory import InventoryWorkflow
            self._inventory_workflow = InventoryWorkflow(books=self.book_repository)
        return self._inventory_workflow

    @property
    def member_directory(self):
        if self._member_directory is None:
            from ..workflows.members import MemberDirectory
            self._member_directory = MemberDirectory(users=self.user_repository)
        return self._member_directory

    def close(self) -> None:
        """Release the database engine."""
        if self._database is not None:
            self._database.dispose()


def init_services(settings: Settings) -> ServiceContainer:
    """Create a service container."""
    return ServiceContainer(settings)


def get_service_container(request: Request) -> ServiceContainer:
    """Get the service container attached to the running app."""
    return request.app.state.services


# =============================================================================
# Individual Service Dependencies
# =============================================================================

def get_session_store(
    container: ServiceContainer = Depends(get_service_container),
):
    """Dependency for the session store."""
    return container.session_store


def get_auth_workflow(
    container: ServiceContainer = Depends(get_service_container),
):
    """Dependency for the auth workflow."""
    return container.auth_workflow


def get_inventory_workflow(
    container: ServiceContainer = Depends(get_service_container),
):
    """Dependency for the inventory workflow."""
    return container.inventory_workflow


def get_member_directory(
    container: ServiceContainer = Depends(get_service_container),
):
    """Dependency for the member directory."""
    return container.member_directory


# =============================================================================
# Session Dependencies
# =============================================================================

def get_active_session(
    request: Request,
    container: ServiceContainer = Depends(get_service_container),
) -> Optional[ActiveSession]:
    """
    Resolve the session cookie to a live session.

    Returns None if there is no cookie or the session has expired.
    """
    session_id = request.cookies.get(container.settings.session_cookie_name)
    return container.session_store.get(session_id)


class RequireRole:
    """
    Guard dependency for role-restricted operations.

    Raises ForbiddenError (rendered as a 403 page) when the active session
    does not hold ``role``.

    Usage:
        require_admin = RequireRole(Role.ADMIN)

        @router.post("/admin/add-books")
        def add_books(session: ActiveSession = Depends(require_admin)):
            ...
    """

    def __init__(self, role: Union[Role, str]):
        self.role = role.value if isinstance(role, Role) else role

    def __call__(
        self,
        session: Optional[ActiveSession] = Depends(get_active_session),
    ) -> ActiveSession:
        if not has_role(session, self.role):
            raise ForbiddenError(self.role)
        return session


require_admin = RequireRole(Role.ADMIN)
