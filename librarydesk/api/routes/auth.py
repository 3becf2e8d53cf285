"""
Authentication Routes for Library Desk.

Handles:
- User registration (Sign Up)
- Login with a server-side session cookie
- Logout
- Role dashboards
"""

from typing import Callable, Optional

from fastapi import APIRouter, Depends, Form, Request
from loguru import logger

from librarydesk.api.dependencies import (
    ServiceContainer,
    get_active_session,
    get_auth_workflow,
    get_service_container,
)
from librarydesk.api.rendering import redirect, render_page
from librarydesk.errors import AuthError, ConflictError, NotFoundError, ValidationError
from librarydesk.sessions import ActiveSession
from librarydesk.storage.models import Role
from librarydesk.workflows.access import has_role, landing_page_for
from librarydesk.workflows.auth import AuthWorkflow

router = APIRouter(tags=["auth"])


@router.get("/", include_in_schema=False)
def root(session: Optional[ActiveSession] = Depends(get_active_session)):
    """Send logged-in users to their dashboard, everyone else to login."""
    if session:
        return redirect(landing_page_for(session.user.role))
    return redirect("/login")


# --- Signup ---

@router.get("/signup")
def signup_form(request: Request):
    return render_page(request, "signup.html", form={}, message="")


@router.post("/signup")
def signup(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    role: str = Form(""),
    auth: AuthWorkflow = Depends(get_auth_workflow),
):
    """Register a new user, then send them to the login page."""
    try:
        auth.signup(name=name, email=email, password=password, role=role)
    except (ValidationError, ConflictError) as e:
        return render_page(
            request,
            "signup.html",
            status_code=e.status_code,
            form={"name": name, "email": email, "role": role},
            message=e.message,
        )
    return redirect("/login?registered=1")


# --- Login / logout ---

@router.get("/login")
def login_form(
    request: Request,
    registered: bool = False,
    session: Optional[ActiveSession] = Depends(get_active_session),
):
    if session:
        return redirect(landing_page_for(session.user.role))
    notice = "Account created. Please log in." if registered else ""
    return render_page(request, "login.html", email="", message="", notice=notice)


@router.post("/login")
def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    auth: AuthWorkflow = Depends(get_auth_workflow),
    container: ServiceContainer = Depends(get_service_container),
):
    """Verify credentials, bind a session and redirect by role."""
    try:
        user = auth.login(email=email, password=password)
    except (NotFoundError, AuthError) as e:
        return render_page(
            request,
            "login.html",
            status_code=e.status_code,
            email=email,
            message=e.message,
            notice="",
        )

    settings = container.settings
    store = container.session_store

    # A re-login from the same browser replaces its previous session.
    store.destroy(request.cookies.get(settings.session_cookie_name))
    session = store.create(user)

    response = redirect(landing_page_for(user.role))
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.session_id,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return response


@router.get("/logout")
def logout(
    request: Request,
    container: ServiceContainer = Depends(get_service_container),
):
    """Destroy the session unconditionally."""
    cookie_name = container.settings.session_cookie_name
    container.session_store.destroy(request.cookies.get(cookie_name))

    response = redirect("/login")
    response.delete_cookie(cookie_name)
    return response


# --- Dashboards ---

def _dashboard(
    request: Request,
    session: Optional[ActiveSession],
    container: ServiceContainer,
    role: Role,
    build_context: Optional[Callable[[], dict]] = None,
):
    """
    Render a role dashboard, or redirect to login on a role mismatch.

    ``build_context`` is only called once the role check has passed.
    """
    if not has_role(session, role):
        logger.debug(f"Dashboard for {role.value} refused; redirecting to login")
        return redirect("/login")
    return render_page(
        request,
        f"{role.value}_dashboard.html",
        session,
        container.session_store,
        **(build_context() if build_context else {}),
    )


@router.get("/student/dashboard")
def student_dashboard(
    request: Request,
    session: Optional[ActiveSession] = Depends(get_active_session),
    container: ServiceContainer = Depends(get_service_container),
):
    return _dashboard(request, session, container, Role.STUDENT)


@router.get("/faculty/dashboard")
def faculty_dashboard(
    request: Request,
    session: Optional[ActiveSession] = Depends(get_active_session),
    container: ServiceContainer = Depends(get_service_container),
):
    return _dashboard(request, session, container, Role.FACULTY)


@router.get("/admin/dashboard")
def admin_dashboard(
    request: Request,
    session: Optional[ActiveSession] = Depends(get_active_session),
    container: ServiceContainer = Depends(get_service_container),
):
    return _dashboard(
        request,
        session,
        container,
        Role.ADMIN,
        build_context=lambda: {"stats": container.book_repository.get_stats()},
    )
