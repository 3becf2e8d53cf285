"""
Error Handling for Library Desk

Centralized error handling:
- Structured JSON error responses for API paths
- HTML error pages for browser paths
- Static 403 page for guard failures
- Logging of errors, without leaking store details to users
"""

import traceback
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse, Response
from loguru import logger

from librarydesk.api.rendering import templates
from librarydesk.errors import ForbiddenError, LibraryError, StoreError

JSON_PATH_PREFIXES = ("/api/", "/books/")


def wants_json(request: Request) -> bool:
    """API and AJAX paths get JSON bodies; everything else gets HTML."""
    return request.url.path.startswith(JSON_PATH_PREFIXES)


def create_error_response(
    error: str,
    code: str,
    status_code: int,
    detail: Optional[str] = None,
) -> JSONResponse:
    """Create standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "code": code,
            "detail": detail,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


def forbidden_response(request: Request) -> Response:
    """The static forbidden page."""
    return templates.TemplateResponse(request, "403.html", {}, status_code=403)


def error_page_response(request: Request, message: str, status_code: int) -> Response:
    return templates.TemplateResponse(
        request,
        "error.html",
        {"message": message, "status_code": status_code},
        status_code=status_code,
    )


def setup_exception_handlers(app):
    """Register exception handlers with FastAPI app."""

    @app.exception_handler(LibraryError)
    async def library_exception_handler(request: Request, exc: LibraryError):
        if isinstance(exc, ForbiddenError):
            logger.warning(f"Forbidden: {request.method} {request.url.path} ({exc.detail})")
            return forbidden_response(request)

        # Store failures keep their driver detail in the log only.
        if isinstance(exc, StoreError):
            logger.error(f"Store error during {exc.operation}: {exc.detail}")
            detail = None
        else:
            logger.warning(f"Library error: {exc.code} - {exc.message}")
            detail = exc.detail

        if wants_json(request):
            return create_error_response(
                error=exc.message,
                code=exc.code,
                status_code=exc.status_code,
                detail=detail,
            )
        return error_page_response(request, exc.message, exc.status_code)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}\n{traceback.format_exc()}"
        )
        if wants_json(request):
            return create_error_response(
                error="Internal Server Error",
                code="INTERNAL_ERROR",
                status_code=500,
                detail="An unexpected error occurred",
            )
        return error_page_response(request, "An unexpected error occurred.", 500)
