"""Public API routers exposed by the FastAPI application."""

from . import (
    attendance,
    auth,
    dashboard,
    health,
    imports,
    students,
    teachers,
)

__all__ = [
    "attendance",
    "auth",
    "dashboard",
    "health",
    "imports",
    "students",
    "teachers",
]
