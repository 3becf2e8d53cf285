"""
Password hashing for Library Desk.
"""

from passlib.context import CryptContext

DEFAULT_HASH_ROUNDS = 10


class PasswordHasher:
    """Salted one-way bcrypt hash with verification."""

    def __init__(self, rounds: int = DEFAULT_HASH_ROUNDS):
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, plain: str) -> str:
        return self._context.hash(plain)

    def verify(self, plain: str, hashed: str) -> bool:
        # Malformed stored hashes count as a mismatch.
        try:
            return self._context.verify(plain, hashed)
        except ValueError:
            return False

