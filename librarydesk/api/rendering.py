"""
Turns workflow results into HTTP responses.
"""

from pathlib import Path
from typing import Any, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from librarydesk.sessions import ActiveSession, SessionStore
from librarydesk.workflows.results import ResultStatus, WorkflowResult

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def redirect(target: str) -> RedirectResponse:
    """303 so a POST is followed by a GET."""
    return RedirectResponse(url=target, status_code=status.HTTP_303_SEE_OTHER)


def render_page(
    request: Request,
    template: str,
    session: Optional[ActiveSession] = None,
    store: Optional[SessionStore] = None,
    status_code: int = status.HTTP_200_OK,
    **context: Any,
) -> Response:
    """Render a template with the session user and any pending flash messages."""
    flashes = store.pop_flashes(session.session_id) if (session and store) else []
    return templates.TemplateResponse(
        request,
        template,
        {
            "user": session.user if session else None,
            "flashes": flashes,
            **context,
        },
        status_code=status_code,
    )


def render_result(
    request: Request,
    result: WorkflowResult,
    session: Optional[ActiveSession],
    store: SessionStore,
) -> Response:
    """
    Browser rendering of a workflow result.

    Success flashes the message and redirects; confirm shows the
    confirmation page; a soft failure re-renders as an error page.
    """
    if result.status == ResultStatus.SUCCESS:
        if session:
            store.push_flash(session.session_id, result.message)
        return redirect(result.redirect_target or "/")

    if result.status == ResultStatus.CONFIRM:
        return render_page(
            request,
            "admin/confirm.html",
            session,
            store,
            message=result.message,
            confirm_target=result.redirect_target,
            cancel_target=result.data.get("cancel_target", "/"),
        )

    return render_page(
        request,
        "error.html",
        session,
        store,
        status_code=status.HTTP_400_BAD_REQUEST,
        message=result.message,
    )


def json_result(result: WorkflowResult) -> JSONResponse:
    """JSON acknowledgment; soft failures are still HTTP 200."""
    return JSONResponse(content=result.to_dict())
