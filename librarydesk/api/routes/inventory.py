"""
AJAX endpoints used by the admin pages.

- Single-copy adjustments return a JSON acknowledgment and never fail
  loudly for business outcomes (success=false instead).
- Member search returns table rows as an HTML fragment.
"""

from fastapi import APIRouter, Depends, Request

from librarydesk.api.dependencies import (
    get_inventory_workflow,
    get_member_directory,
    require_admin,
)
from librarydesk.api.rendering import json_result, templates
from librarydesk.api.schemas import InventoryAdjustResponse, IsbnRequest
from librarydesk.sessions import ActiveSession
from librarydesk.workflows.inventory import AdjustDirection, InventoryWorkflow
from librarydesk.workflows.members import MemberDirectory

router = APIRouter(prefix="/api", tags=["inventory"])


@router.post("/inventory/add-one", response_model=InventoryAdjustResponse)
def add_one(
    payload: IsbnRequest,
    session: ActiveSession = Depends(require_admin),
    inventory: InventoryWorkflow = Depends(get_inventory_workflow),
):
    """Add one available copy."""
    result = inventory.adjust_by_one(payload.isbn, AdjustDirection.INCREMENT, actor=session.user)
    return json_result(result)


@router.post("/inventory/remove-one", response_model=InventoryAdjustResponse)
def remove_one(
    payload: IsbnRequest,
    session: ActiveSession = Depends(require_admin),
    inventory: InventoryWorkflow = Depends(get_inventory_workflow),
):
    """Remove one available copy; refuses softly at zero."""
    result = inventory.adjust_by_one(payload.isbn, AdjustDirection.DECREMENT, actor=session.user)
    return json_result(result)


@router.get("/admin/search-members")
def search_members(
    request: Request,
    query: str = "",
    session: ActiveSession = Depends(require_admin),
    members: MemberDirectory = Depends(get_member_directory),
):
    """Matching members as ``<tr>`` rows for the view-members table."""
    return templates.TemplateResponse(
        request,
        "admin/member_rows.html",
        {"members": members.search_members(query)},
    )
