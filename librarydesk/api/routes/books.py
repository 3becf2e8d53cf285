"""
Book API Routes

Public ISBN lookup used by the add/remove forms to pre-fill details.
"""

from fastapi import APIRouter, Depends
from loguru import logger

from librarydesk.api.dependencies import get_inventory_workflow
from librarydesk.api.rendering import json_result
from librarydesk.api.schemas import BookLookupResponse, IsbnRequest
from librarydesk.workflows.inventory import InventoryWorkflow

router = APIRouter(prefix="/books", tags=["books"])


@router.post("/getBookDetailsByISBN", response_model=BookLookupResponse)
def get_book_details_by_isbn(
    payload: IsbnRequest,
    inventory: InventoryWorkflow = Depends(get_inventory_workflow),
):
    """Look up a book by its 13-character ISBN."""
    logger.info(f"Looking up ISBN: {payload.isbn}")
    return json_result(inventory.lookup_by_isbn(payload.isbn))
