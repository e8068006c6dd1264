"""Attendance record endpoints."""

from __future__ import annotations

from ..services.resources import ATTENDANCE_RESOURCE
from .crud import CrudController, build_crud_router

controller = CrudController(ATTENDANCE_RESOURCE)
router = build_crud_router(controller, prefix="/attendance", tags=["attendance"])
