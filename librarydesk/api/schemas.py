"""
API Schemas for Library Desk

Pydantic models for the JSON endpoints:
- Inventory single-unit adjustment
- ISBN lookup
- Health
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Book Schemas
# =============================================================================

class BookResponse(BaseModel):
    """Book row as exposed over JSON."""

    isbn: str
    book_name: str
    author_name: str
    publisher_name: str
    available: int = Field(..., ge=0)
    borrowed: int = Field(..., ge=0)

    model_config = ConfigDict(from_attributes=True)


class IsbnRequest(BaseModel):
    """
    Body of the inventory and lookup endpoints.

    Any JSON scalar is accepted as the ISBN and coerced to text; length and
    content are judged by the workflow, which answers softly.
    """

    isbn: str = ""

    @field_validator("isbn", mode="before")
    @classmethod
    def coerce_isbn(cls, value):
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    model_config = ConfigDict(
        json_schema_extra={"example": {"isbn": "9780441172719"}}
    )


class InventoryAdjustResponse(BaseModel):
    """Acknowledgment for add-one / remove-one."""

    success: bool
    message: str
    isbn: Optional[str] = None
    available: Optional[int] = None


class BookLookupResponse(BaseModel):
    """Result of an ISBN lookup."""

    success: bool
    message: str
    book: Optional[BookResponse] = None


# =============================================================================
# System Schemas
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    components: dict[str, str] = Field(default_factory=dict)
