"""
Library Desk - FastAPI web layer.
"""

from .main import create_app, main
from .dependencies import (
    Settings,
    get_settings,
    get_service_container,
    ServiceContainer,
    RequireRole,
    require_admin,
)

__all__ = [
    # Application
    "create_app",
    "main",
    # Dependencies
    "Settings",
    "get_settings",
    "get_service_container",
    "ServiceContainer",
    "RequireRole",
    "require_admin",
]
