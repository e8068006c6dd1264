"""Teacher record endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.orm import Session

from ..db import get_session_dependency
from ..services.resources import TEACHER_RESOURCE
from .crud import CrudController, build_crud_router

controller = CrudController(TEACHER_RESOURCE)
router = build_crud_router(controller, prefix="/teachers", tags=["teachers"])

# Mounted only when APP_ENV=dev so the first account can be created without a login.
dev_router = APIRouter(prefix="/dev/teachers", tags=["dev"])


@dev_router.post("", status_code=status.HTTP_201_CREATED, summary="Create a Teacher without a session")
def create_teacher_unauthenticated(
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_session_dependency),
) -> Response:
    return controller.create(session, payload)
