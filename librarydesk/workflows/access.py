"""
Access guard predicates.
"""

from typing import Optional, Union

from librarydesk.sessions import ActiveSession
from librarydesk.storage.models import Role

LANDING_PAGES = {
    Role.ADMIN.value: "/admin/dashboard",
    Role.FACULTY.value: "/faculty/dashboard",
}
DEFAULT_LANDING_PAGE = "/student/dashboard"


def has_role(session: Optional[ActiveSession], role: Union[Role, str]) -> bool:
    """True iff a live session exists and its user holds ``role``."""
    if session is None:
        return False
    expected = role.value if isinstance(role, Role) else role
    return session.user.role == expected


def is_admin(session: Optional[ActiveSession]) -> bool:
    return has_role(session, Role.ADMIN)


def landing_page_for(role: Optional[str]) -> str:
    """Dashboard path for a role; unknown roles land on the student dashboard."""
    return LANDING_PAGES.get(role, DEFAULT_LANDING_PAGE)
