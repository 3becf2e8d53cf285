"""
Inventory Reconciliation for Library Desk

Add, top-up and removal of books by ISBN. Each call is a one-shot
decision table run against the current row for the ISBN:

Add:
    absent                      -> insert (available=quantity, borrowed=0)
    present, details match      -> confirm: offer a quantity top-up
    present, details differ     -> ValidationError

Remove:
    absent                      -> NotFoundError
    details differ              -> ValidationError (details)
    quantity not positive       -> ValidationError (quantity)
    quantity > available        -> ValidationError (quantity)
    quantity < available        -> available -= quantity
    quantity == available       -> available = 0 if borrowed > 0, else delete

Lookup and check are separate statements; nothing here spans them with a
transaction or lock.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from loguru import logger

from librarydesk.errors import NotFoundError, ValidationError
from librarydesk.sessions import SessionUser
from librarydesk.storage.book_repository import BookRepository, StoredBook
from librarydesk.workflows.results import WorkflowResult

ISBN_LENGTH = 13
DASHBOARD = "/admin/dashboard"
ADD_BOOKS = "/admin/add-books"

DETAILS_MISMATCH = (
    "Book details don't match with ISBN. "
    "Please enter the correct ISBN or check the book details."
)
BOOK_MISSING = "Invalid request! This book does not exist in the library."
INVALID_QUANTITY = "Invalid quantity entered. Quantity must be a positive number."

# Largest quantity accepted in one request; keeps counters inside a 32-bit INTEGER column.
MAX_QUANTITY = 2**31 - 1


class AdjustDirection(str, Enum):
    """Single-unit adjustment direction."""
    INCREMENT = "increment"
    DECREMENT = "decrement"


def _normalize(value: Optional[str]) -> str:
    return (value or "").strip().lower()


@dataclass
class BookDetails:
    """Book identity as submitted on the add/remove forms."""

    isbn: str
    book_name: str
    author_name: str
    publisher_name: str

    def matches(self, book: StoredBook) -> bool:
        """Trimmed, case-insensitive comparison of name, author and publisher."""
        return (
            _normalize(self.book_name) == _normalize(book.book_name)
            and _normalize(self.author_name) == _normalize(book.author_name)
            and _normalize(self.publisher_name) == _normalize(book.publisher_name)
        )


def parse_positive_quantity(raw, default: Optional[int] = None) -> int:
    """
    Parse a form quantity.

    Blank input returns ``default`` when one is given. Anything that is not
    a positive integer up to MAX_QUANTITY raises ValidationError.
    """
    text = str(raw).strip() if raw is not None else ""
    if not text and default is not None:
        return default
    try:
        quantity = int(text)
    except ValueError:
        raise ValidationError(INVALID_QUANTITY, field="quantity")
    if quantity <= 0 or quantity > MAX_QUANTITY:
        raise ValidationError(INVALID_QUANTITY, field="quantity")
    return quantity


def parse_top_up_quantity(raw) -> int:
    """Top-up quantity: anything missing, malformed, non-positive or over MAX_QUANTITY counts as 1."""
    try:
        return parse_positive_quantity(raw, default=1)
    except ValidationError:
        return 1


def _actor_label(actor: Optional[SessionUser]) -> str:
    return f"user {actor.id}" if actor else "anonymous"


class InventoryWorkflow:
    """Inventory operations over the books table."""

    def __init__(self, books: BookRepository):
        self.books = books

    # -------------------------------------------------------------------------
    # Add / top-up
    # -------------------------------------------------------------------------

    def add_book(
        self,
        details: BookDetails,
        quantity,
        actor: Optional[SessionUser] = None,
    ) -> WorkflowResult:
        """
        Add a new title, or offer a top-up when the ISBN is already stocked.

        Raises:
            ValidationError: bad ISBN/quantity, or details differ from the stored row
        """
        isbn = details.isbn.strip()
        if len(isbn) != ISBN_LENGTH or not (isbn.isascii() and isbn.isdigit()):
            raise ValidationError("ISBN must be a 13-digit number.", field="details")
        qty = parse_positive_quantity(quantity, default=1)

        existing = self.books.get_by_isbn(isbn)

        if existing is None:
            self.books.create(
                isbn=isbn,
                book_name=details.book_name.strip(),
                author_name=details.author_name.strip(),
                publisher_name=details.publisher_name.strip(),
                available=qty,
                borrowed=0,
            )
            logger.info(f"{_actor_label(actor)} added {qty} copies of {isbn}")
            return WorkflowResult.success(
                "Book(s) added successfully",
                redirect_target=DASHBOARD,
                isbn=isbn,
                available=qty,
            )

        if not details.matches(existing):
            logger.warning(f"Add rejected for {isbn}: details differ from stored book")
            raise ValidationError(DETAILS_MISMATCH, field="details")

        return WorkflowResult.confirm(
            "This book already exists in the library. "
            "Do you want to add more quantity of this book into the library?",
            redirect_target=f"/admin/update-quantity?isbn={isbn}&quantity={qty}",
            isbn=isbn,
            quantity=qty,
            cancel_target=ADD_BOOKS,
        )

    def update_quantity(
        self,
        isbn: str,
        quantity,
        actor: Optional[SessionUser] = None,
    ) -> WorkflowResult:
        """
        Increase the available count of an ISBN.

        No existence check: an unknown ISBN updates nothing and is not an error.
        """
        isbn = (isbn or "").strip()
        qty = parse_top_up_quantity(quantity)

        updated = self.books.increment_available(isbn, qty)
        if updated:
            logger.info(f"{_actor_label(actor)} topped up {isbn} by {qty}")
        else:
            logger.debug(f"Top-up for unknown ISBN {isbn} matched no rows")

        return WorkflowResult.success(
            f"{qty} book(s) added successfully to existing inventory (ISBN: {isbn})!",
            redirect_target=DASHBOARD,
            isbn=isbn,
            quantity=qty,
        )

    # -------------------------------------------------------------------------
    # Remove
    # -------------------------------------------------------------------------

    def remove_book(
        self,
        details: BookDetails,
        quantity,
        actor: Optional[SessionUser] = None,
    ) -> WorkflowResult:
        """
        Remove copies of a title.

        Raises:
            NotFoundError: ISBN not stocked
            ValidationError: details differ, or quantity invalid / too large
        """
        isbn = details.isbn.strip()
        book = self.books.get_by_isbn(isbn)

        if book is None:
            raise NotFoundError(BOOK_MISSING, resource="book", identifier=isbn)

        if not details.matches(book):
            raise ValidationError(DETAILS_MISMATCH, field="details")

        qty = parse_positive_quantity(quantity)

        if qty > book.available:
            raise ValidationError(
                f"Invalid quantity entered. Quantity to remove ({qty}) is more "
                f"than the available quantity ({book.available}).",
                field="quantity",
            )

        who = _actor_label(actor)

        if qty < book.available:
            if not self.books.decrement_available(isbn, qty):
                # Another request took copies between the read and this update.
                current = self.books.get_by_isbn(isbn)
                remaining = current.available if current else 0
                raise ValidationError(
                    f"Invalid quantity entered. Quantity to remove ({qty}) is more "
                    f"than the available quantity ({remaining}).",
                    field="quantity",
                )
            logger.info(f"{who} removed {qty} copies of {isbn}")
            return WorkflowResult.success(
                "Book(s) removed successfully",
                redirect_target=DASHBOARD,
                isbn=isbn,
                available=book.available - qty,
            )

        if book.borrowed > 0:
            self.books.set_available(isbn, 0)
            logger.info(f"{who} zeroed {isbn}; {book.borrowed} copies still on loan")
            return WorkflowResult.success(
                "Book(s) removed successfully! (Available set to zero)",
                redirect_target=DASHBOARD,
                isbn=isbn,
                available=0,
            )

        self.books.delete(isbn)
        logger.info(f"{who} deleted {isbn}")
        return WorkflowResult.success(
            "Book(s) permanently removed from library",
            redirect_target=DASHBOARD,
            isbn=isbn,
            deleted=True,
        )

    # -------------------------------------------------------------------------
    # Soft operations (never raise for business outcomes)
    # -------------------------------------------------------------------------

    def adjust_by_one(
        self,
        isbn: str,
        direction: AdjustDirection,
        actor: Optional[SessionUser] = None,
    ) -> WorkflowResult:
        """Move the available count by one copy."""
        isbn = (isbn or "").strip()

        if direction == AdjustDirection.INCREMENT:
            updated = self.books.increment_available(isbn, 1)
        else:
            updated = self.books.decrement_available(isbn, 1)

        book = self.books.get_by_isbn(isbn)
        if book is None:
            return WorkflowResult.failure("Book not found", isbn=isbn)

        if not updated:
            return WorkflowResult.failure(
                "No available copies left to remove",
                isbn=isbn,
                available=book.available,
            )

        logger.info(f"{_actor_label(actor)} {direction.value}ed {isbn} to {book.available}")
        verb = "added" if direction == AdjustDirection.INCREMENT else "removed"
        return WorkflowResult.success(
            f"One copy {verb}",
            isbn=isbn,
            available=book.available,
        )

    def lookup_by_isbn(self, isbn: str) -> WorkflowResult:
        """Fetch book details for a 13-character ISBN."""
        isbn = (isbn or "").strip()
        if len(isbn) != ISBN_LENGTH:
            return WorkflowResult.failure("Invalid ISBN. An ISBN must be 13 characters long.")

        book = self.books.get_by_isbn(isbn)
        if book is None:
            return WorkflowResult.failure("Book not found", isbn=isbn)

        return WorkflowResult.success("Book found", book=book.to_dict())

    def list_inventory(self) -> list[StoredBook]:
        """All books ordered by name."""
        return self.books.list_all()
