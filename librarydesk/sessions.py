"""
Server-side sessions.

A session id (random, carried in a cookie) maps to a snapshot of the
authenticated user plus any pending flash messages. Sessions expire
after a fixed max age counted from login; expired entries are purged
lazily on access.
"""

import secrets
import threading
import time
from dataclasses import dataclass, field
from typing import Dict, Optional

from loguru import logger

from librarydesk.storage.user_repository import StoredUser

DEFAULT_MAX_AGE_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class SessionUser:
    """User snapshot bound at login. The password hash is not copied."""

    id: int
    name: str
    email: str
    role: str

    @classmethod
    def from_stored(cls, user: StoredUser) -> "SessionUser":
        return cls(id=user.id, name=user.name, email=user.email, role=user.role)


@dataclass
class ActiveSession:
    """State for a single logged-in session."""

    session_id: str
    user: SessionUser
    created_at: float
    expires_at: float
    flashes: list = field(default_factory=list)

    def is_expired(self, now: Optional[float] = None) -> bool:
        return (now if now is not None else time.time()) >= self.expires_at


class SessionStore:
    """
    In-memory session store.

    Suitable for single-instance deployments. Route functions run in a
    thread pool, so every access holds ``_lock``.
    """

    def __init__(self, max_age_seconds: int = DEFAULT_MAX_AGE_SECONDS):
        self.max_age_seconds = max_age_seconds
        self._sessions: Dict[str, ActiveSession] = {}
        self._lock = threading.Lock()
        self._cleanup_interval = 300
        self._last_cleanup = time.time()

    def _cleanup_expired(self, now: float) -> None:
        """Drop expired sessions. Caller holds the lock."""
        if now - self._last_cleanup < self._cleanup_interval:
            return

        expired = [sid for sid, s in self._sessions.items() if s.is_expired(now)]
        for sid in expired:
            del self._sessions[sid]

        self._last_cleanup = now
        if expired:
            logger.debug(f"Cleaned up {len(expired)} expired sessions")

    def create(self, user: StoredUser) -> ActiveSession:
        """Bind a new session to ``user``."""
        now = time.time()
        session = ActiveSession(
            session_id=secrets.token_urlsafe(32),
            user=SessionUser.from_stored(user),
            created_at=now,
            expires_at=now + self.max_age_seconds,
        )
        with self._lock:
            self._cleanup_expired(now)
            self._sessions[session.session_id] = session

        logger.info(f"Session opened for user {user.id} ({user.role})")
        return session

    def get(self, session_id: Optional[str]) -> Optional[ActiveSession]:
        """Look up a live session; expired ones are removed and reported as absent."""
        if not session_id:
            return None

        now = time.time()
        with self._lock:
            self._cleanup_expired(now)
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if session.is_expired(now):
                del self._sessions[session_id]
                return None
            return session

    def destroy(self, session_id: Optional[str]) -> None:
        """Forget a session. Unknown ids are ignored."""
        if not session_id:
            return
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session:
            logger.info(f"Session closed for user {session.user.id}")

    def push_flash(self, session_id: str, message: str) -> None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session:
                session.flashes.append(message)

    def pop_flashes(self, session_id: str) -> list[str]:
        with self._lock:
            session = self._sessions.get(session_id)
            if not session:
                return []
            messages, session.flashes = session.flashes, []
            return messages

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
