"""Student record endpoints."""

from __future__ import annotations

from ..services.resources import STUDENT_RESOURCE
from .crud import CrudController, build_crud_router

controller = CrudController(STUDENT_RESOURCE)
router = build_crud_router(controller, prefix="/students", tags=["students"])
