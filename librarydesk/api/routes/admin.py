"""
Admin Routes

Inventory forms (add, top-up, remove), inventory listing and the member
roster. Every route here requires an admin session; anything else gets
the 403 page.
"""

from fastapi import APIRouter, Depends, Form, Request
from loguru import logger

from librarydesk.api.dependencies import (
    get_inventory_workflow,
    get_member_directory,
    get_session_store,
    require_admin,
)
from librarydesk.api.rendering import render_page, render_result
from librarydesk.errors import NotFoundError, StoreError, ValidationError
from librarydesk.sessions import ActiveSession, SessionStore
from librarydesk.workflows.inventory import BookDetails, InventoryWorkflow
from librarydesk.workflows.members import MemberDirectory

router = APIRouter(prefix="/admin", tags=["admin"])


def _form_values(isbn="", book_name="", author_name="", publisher_name="", quantity="1") -> dict:
    return {
        "isbn": isbn,
        "book_name": book_name,
        "author_name": author_name,
        "publisher_name": publisher_name,
        "quantity": quantity or "1",
    }


# =============================================================================
# Add books
# =============================================================================

@router.get("/add-books")
def add_books_form(
    request: Request,
    session: ActiveSession = Depends(require_admin),
    store: SessionStore = Depends(get_session_store),
):
    return render_page(request, "admin/add_books.html", session, store, form=_form_values(), message="")


@router.post("/add-books")
def add_books(
    request: Request,
    isbn: str = Form(""),
    book_name: str = Form(""),
    author_name: str = Form(""),
    publisher_name: str = Form(""),
    quantity: str = Form("1"),
    session: ActiveSession = Depends(require_admin),
    store: SessionStore = Depends(get_session_store),
    inventory: InventoryWorkflow = Depends(get_inventory_workflow),
):
    """Add a title, or offer a top-up if the ISBN is already stocked."""
    form = _form_values(isbn, book_name, author_name, publisher_name, quantity)
    details = BookDetails(isbn, book_name, author_name, publisher_name)

    try:
        result = inventory.add_book(details, quantity, actor=session.user)
    except (ValidationError, StoreError) as e:
        return render_page(
            request,
            "admin/add_books.html",
            session,
            store,
            status_code=e.status_code,
            form=form,
            message=e.message,
        )

    return render_result(request, result, session, store)


@router.get("/update-quantity")
def update_quantity(
    request: Request,
    isbn: str = "",
    quantity: str = "",
    session: ActiveSession = Depends(require_admin),
    store: SessionStore = Depends(get_session_store),
    inventory: InventoryWorkflow = Depends(get_inventory_workflow),
):
    """Top up available copies for an ISBN."""
    result = inventory.update_quantity(isbn, quantity, actor=session.user)
    return render_result(request, result, session, store)


# =============================================================================
# Remove books
# =============================================================================

@router.get("/remove-books")
def remove_books_form(
    request: Request,
    isbn: str = "",
    book_name: str = "",
    author_name: str = "",
    publisher_name: str = "",
    quantity: str = "1",
    session: ActiveSession = Depends(require_admin),
    store: SessionStore = Depends(get_session_store),
):
    """Remove form, pre-filled from the query string."""
    return render_page(
        request,
        "admin/remove_books.html",
        session,
        store,
        form=_form_values(isbn, book_name, author_name, publisher_name, quantity),
        message="",
        quantity_message="",
    )


@router.post("/remove-books")
def remove_books(
    request: Request,
    isbn: str = Form(""),
    book_name: str = Form(""),
    author_name: str = Form(""),
    publisher_name: str = Form(""),
    quantity: str = Form(""),
    session: ActiveSession = Depends(require_admin),
    store: SessionStore = Depends(get_session_store),
    inventory: InventoryWorkflow = Depends(get_inventory_workflow),
):
    """Remove copies; details errors and quantity errors go to separate slots."""
    form = _form_values(isbn, book_name, author_name, publisher_name, quantity)
    details = BookDetails(isbn, book_name, author_name, publisher_name)

    try:
        result = inventory.remove_book(details, quantity, actor=session.user)
    except (NotFoundError, ValidationError, StoreError) as e:
        quantity_error = isinstance(e, ValidationError) and e.field == "quantity"
        return render_page(
            request,
            "admin/remove_books.html",
            session,
            store,
            status_code=e.status_code,
            form=form,
            message="" if quantity_error else e.message,
            quantity_message=e.message if quantity_error else "",
        )

    return render_result(request, result, session, store)


# =============================================================================
# Listings
# =============================================================================

@router.get("/manage-inventory")
def manage_inventory(
    request: Request,
    session: ActiveSession = Depends(require_admin),
    store: SessionStore = Depends(get_session_store),
    inventory: InventoryWorkflow = Depends(get_inventory_workflow),
):
    books = inventory.list_inventory()
    logger.debug(f"Listing {len(books)} books")
    return render_page(request, "admin/manage_inventory.html", session, store, books=books)


@router.get("/view-members")
def view_members(
    request: Request,
    session: ActiveSession = Depends(require_admin),
    store: SessionStore = Depends(get_session_store),
    members: MemberDirectory = Depends(get_member_directory),
):
    return render_page(
        request,
        "admin/view_members.html",
        session,
        store,
        members=members.list_members(),
    )
