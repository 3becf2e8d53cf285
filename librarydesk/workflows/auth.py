"""
Signup and login.
"""

from loguru import logger

from librarydesk.errors import AuthError, NotFoundError, ValidationError
from librarydesk.security import PasswordHasher
from librarydesk.storage.models import Role
from librarydesk.storage.user_repository import StoredUser, UserRepository
from librarydesk.workflows.results import WorkflowResult

VALID_ROLES = {r.value for r in Role}


class AuthWorkflow:
    """
    Account creation and credential checks.

    Session binding is left to the caller: ``login`` returns the verified
    user and the API layer opens the session.
    """

    def __init__(self, users: UserRepository, hasher: PasswordHasher):
        self.users = users
        self.hasher = hasher

    def signup(self, name: str, email: str, password: str, role: str = "") -> WorkflowResult:
        """
        Create an account.

        Raises:
            ValidationError: a required field is empty or the role is unknown
            ConflictError: the email is already registered
        """
        name = (name or "").strip()
        email = (email or "").strip()
        role = (role or "").strip().lower() or Role.STUDENT.value

        if not name or not email or not password:
            raise ValidationError("All fields are required.")
        if role not in VALID_ROLES:
            raise ValidationError(f"Unknown role '{role}'.", field="role")

        user = self.users.create(
            name=name,
            email=email,
            password_hash=self.hasher.hash(password),
            role=role,
        )
        logger.info(f"Signup complete for {user.email} as {user.role}")

        return WorkflowResult.success(
            "Account created. Please log in.",
            redirect_target="/login",
            user_id=user.id,
        )

    def login(self, email: str, password: str) -> StoredUser:
        """
        Verify credentials.

        Raises:
            NotFoundError: no account for ``email``
            AuthError: password does not match
        """
        user = self.users.get_by_email((email or "").strip())
        if user is None:
            logger.warning(f"Login failed, unknown email: {email}")
            raise NotFoundError("User not found.", resource="user", identifier=email)

        if not self.hasher.verify(password or "", user.password_hash):
            logger.warning(f"Login failed, bad password for user {user.id}")
            raise AuthError("Incorrect password.")

        logger.info(f"Login succeeded for user {user.id}")
        return user
