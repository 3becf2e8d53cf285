"""
API Routes for Library Desk

Route modules:
- auth: signup, login, logout, dashboards
- admin: inventory forms and listings
- inventory: AJAX endpoints for the admin pages
- books: public ISBN lookup
"""

from librarydesk.api.routes.auth import router as auth_router
from librarydesk.api.routes.admin import router as admin_router
from librarydesk.api.routes.inventory import router as inventory_router
from librarydesk.api.routes.books import router as books_router

__all__ = [
    "auth_router",
    "admin_router",
    "inventory_router",
    "books_router",
]
