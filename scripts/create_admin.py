#!/usr/bin/env python3
"""
Create an admin account from the command line.

Re-running with an email that is already registered leaves the
existing account untouched.

    python scripts/create_admin.py "Ada Admin" ada@library.test
"""

import argparse
import getpass
import os
import sys

from dotenv import load_dotenv
from loguru import logger

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from librarydesk.api.dependencies import ServiceContainer, Settings
from librarydesk.errors import LibraryError
from librarydesk.storage.models import Role


def create_admin(container: ServiceContainer, name: str, email: str, password: str) -> bool:
    """Returns False if the email was already registered."""
    existing = container.user_repository.get_by_email(email)
    if existing is not None:
        logger.info(f"{email} already registered as {existing.role} (id {existing.id}); nothing to do")
        return False

    container.auth_workflow.signup(name=name, email=email, password=password, role=Role.ADMIN.value)
    logger.info(f"Admin account created for {email}")
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a Library Desk admin account")
    parser.add_argument("name", help="Display name")
    parser.add_argument("email", help="Login email")
    parser.add_argument("--password", help="Password (prompted for when omitted)")
    args = parser.parse_args()

    load_dotenv()
    password = args.password or getpass.getpass("Password: ")

    container = ServiceContainer(Settings.from_env())
    try:
        create_admin(container, args.name, args.email, password)
    except LibraryError as e:
        logger.error(e.message)
        return 1
    finally:
        container.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
