"""
Unit tests for the server-side session store.
"""

import time

import pytest

from librarydesk.sessions import SessionStore
from librarydesk.storage.user_repository import StoredUser


@pytest.fixture
def user() -> StoredUser:
    return StoredUser(id=7, name="Ada", email="ada@example.com", role="admin", password_hash="$2b$04$hash")


class TestSessionStore:
    """Tests for SessionStore."""

    def test_create_and_get(self, user):
        store = SessionStore()
        session = store.create(user)

        found = store.get(session.session_id)

        assert found is session
        assert found.user.id == 7
        assert found.user.role == "admin"
        assert len(store) == 1

    def test_snapshot_excludes_password_hash(self, user):
        session = SessionStore().create(user)

        assert not hasattr(session.user, "password_hash")

    def test_session_ids_are_unique(self, user):
        store = SessionStore()
        ids = {store.create(user).session_id for _ in range(20)}

        assert len(ids) == 20

    @pytest.mark.parametrize("session_id", [None, "", "unknown"])
    def test_missing_session(self, session_id):
        assert SessionStore().get(session_id) is None

    def test_expired_session_is_dropped(self, user):
        store = SessionStore(max_age_seconds=60)
        session = store.create(user)
        session.expires_at = time.time() - 1

        assert store.get(session.session_id) is None
        assert len(store) == 0

    def test_destroy(self, user):
        store = SessionStore()
        session = store.create(user)

        store.destroy(session.session_id)
        store.destroy(session.session_id)
        store.destroy(None)

        assert store.get(session.session_id) is None

    def test_flashes_are_popped_once(self, user):
        store = SessionStore()
        session = store.create(user)

        store.push_flash(session.session_id, "Book(s) added successfully")
        store.push_flash(session.session_id, "second")

        assert store.pop_flashes(session.session_id) == ["Book(s) added successfully", "second"]
        assert store.pop_flashes(session.session_id) == []
        assert store.pop_flashes("unknown") == []
