"""Entrypoint for the FastAPI application.

Run with ``uvicorn campus.backend.src.main:create_app --factory``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import (
    attendance,
    auth,
    dashboard,
    health,
    imports,
    students,
    teachers,
)
from .api.errors import register_exception_handlers
from .core.config import get_settings
from .core.context import AppContext, build_context
from .core.logging import configure_logging
from .core.security import require_identity
from .db import init_db


def create_app(context: AppContext | None = None) -> FastAPI:
    """Build the application around ``context`` (or one built from the environment)."""

    settings = context.settings if context is not None else get_settings()
    configure_logging(settings.log_level)
    context = context or build_context(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        init_db(context)
        yield
        context.dispose()

    app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    protected = [Depends(require_identity)]

    app.include_router(auth.router)
    app.include_router(health.router, prefix="/api")
    app.include_router(auth.identity_router, prefix="/api", dependencies=protected)
    app.include_router(teachers.router, prefix="/api", dependencies=protected)
    app.include_router(students.router, prefix="/api", dependencies=protected)
    app.include_router(attendance.router, prefix="/api", dependencies=protected)
    app.include_router(imports.router, prefix="/api", dependencies=protected)
    app.include_router(dashboard.router, prefix="/api", dependencies=protected)
    if settings.is_dev:
        app.include_router(teachers.dev_router, prefix="/api")

    return app
