"""
Pytest configuration and fixtures for Library Desk tests.
"""

import sys
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from librarydesk.api.dependencies import ServiceContainer, Settings
from librarydesk.api.main import create_app
from librarydesk.storage import BookRepository, Database, UserRepository
from librarydesk.security import PasswordHasher
from librarydesk.workflows import AuthWorkflow, InventoryWorkflow, MemberDirectory


ADMIN_EMAIL = "admin@library.test"
STUDENT_EMAIL = "student@library.test"
FACULTY_EMAIL = "faculty@library.test"
PASSWORD = "correct horse"


# =============================================================================
# Test Settings
# =============================================================================

def get_test_settings(database_url: str) -> Settings:
    """Return settings configured for testing."""
    return Settings(
        database_url=database_url,
        database_echo=False,
        password_hash_rounds=4,
        environment="test",
        debug=False,
    )


# =============================================================================
# Storage / Workflow Fixtures
# =============================================================================

@pytest.fixture
def database():
    """Fresh in-memory database per test."""
    db = Database("sqlite:///:memory:")
    yield db
    db.dispose()


@pytest.fixture
def book_repository(database) -> BookRepository:
    return BookRepository(database)


@pytest.fixture
def user_repository(database) -> UserRepository:
    return UserRepository(database)


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def inventory(book_repository) -> InventoryWorkflow:
    return InventoryWorkflow(books=book_repository)


@pytest.fixture
def auth(user_repository, hasher) -> AuthWorkflow:
    return AuthWorkflow(users=user_repository, hasher=hasher)


@pytest.fixture
def members(user_repository) -> MemberDirectory:
    return MemberDirectory(users=user_repository)


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def settings(tmp_path) -> Settings:
    return get_test_settings(f"sqlite:///{tmp_path / 'library.db'}")


@pytest.fixture
def app(settings):
    """Create FastAPI application for testing."""
    application = create_app(settings)
    yield application
    application.state.services.close()


@pytest.fixture
def container(app) -> ServiceContainer:
    """The service container the app under test is using."""
    return app.state.services


@pytest.fixture
def seeded_users(container) -> dict:
    """One account per role, all sharing PASSWORD."""
    auth_workflow = container.auth_workflow
    accounts = {
        "admin": ("Ada Admin", ADMIN_EMAIL),
        "student": ("Sam Student", STUDENT_EMAIL),
        "faculty": ("Fay Faculty", FACULTY_EMAIL),
    }
    for role, (name, email) in accounts.items():
        auth_workflow.signup(name=name, email=email, password=PASSWORD, role=role)
    return {role: email for role, (_, email) in accounts.items()}


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _login(client: AsyncClient, email: str) -> AsyncClient:
    response = await client.post("/login", data={"email": email, "password": PASSWORD})
    assert response.status_code == 303
    return client


@pytest_asyncio.fixture
async def admin_client(client, seeded_users) -> AsyncClient:
    """Client holding an admin session cookie."""
    return await _login(client, seeded_users["admin"])


@pytest_asyncio.fixture
async def student_client(client, seeded_users) -> AsyncClient:
    """Client holding a student session cookie."""
    return await _login(client, seeded_users["student"])


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def sample_book_data() -> dict:
    """Sample book form data for testing."""
    return {
        "isbn": "9780743273565",
        "book_name": "The Great Gatsby",
        "author_name": "F. Scott Fitzgerald",
        "publisher_name": "Scribner",
    }


@pytest.fixture
def sample_books_batch() -> list[dict]:
    """Multiple sample books for batch testing."""
    return [
        {
            "isbn": "9780451524935",
            "book_name": "1984",
            "author_name": "George Orwell",
            "publisher_name": "Signet Classics",
        },
        {
            "isbn": "9780061120084",
            "book_name": "To Kill a Mockingbird",
            "author_name": "Harper Lee",
            "publisher_name": "Harper Perennial",
        },
        {
            "isbn": "9780141439518",
            "book_name": "Pride and Prejudice",
            "author_name": "Jane Austen",
            "publisher_name": "Penguin Classics",
        },
    ]
