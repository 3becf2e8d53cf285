"""
Workflows for Library Desk

Request-independent business logic:
- auth: signup and credential checks
- inventory: add / top-up / remove reconciliation by ISBN
- members: member listing and search
- access: role predicates used by the API guards
"""

from librarydesk.workflows.results import ResultStatus, WorkflowResult
from librarydesk.workflows.access import has_role, is_admin, landing_page_for
from librarydesk.workflows.auth import AuthWorkflow
from librarydesk.workflows.inventory import (
    AdjustDirection,
    BookDetails,
    InventoryWorkflow,
)
from librarydesk.workflows.members import MemberDirectory

__all__ = [
    "ResultStatus",
    "WorkflowResult",
    "has_role",
    "is_admin",
    "landing_page_for",
    "AuthWorkflow",
    "AdjustDirection",
    "BookDetails",
    "InventoryWorkflow",
    "MemberDirectory",
]
