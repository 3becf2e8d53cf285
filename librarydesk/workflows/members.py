"""
Member directory (read-only).
"""

from librarydesk.storage.user_repository import StoredUser, UserRepository


class MemberDirectory:
    """Listing and search over registered users."""

    def __init__(self, users: UserRepository):
        self.users = users

    def list_members(self) -> list[StoredUser]:
        return self.users.list_all()

    def search_members(self, query: str = "") -> list[StoredUser]:
        """
        Case-insensitive substring search over id, email, role and name.

        Args:
            query: Search text; empty or blank matches all users

        Returns:
            Matching users ordered by ascending id
        """
        return self.users.search((query or "").strip())
