"""Bulk import endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from ..core.context import AppContext
from ..db import get_context
from ..schemas.envelope import success
from ..schemas.imports import ImportRequest
from ..services.importer import import_records

router = APIRouter(prefix="/import", tags=["import"])


@router.post("")
async def run_import(
    payload: ImportRequest,
    context: AppContext = Depends(get_context),
) -> dict[str, Any]:
    """Import teacher rows and link student rows; returns every outcome."""

    report = await import_records(
        context,
        payload.teachers,
        payload.students,
        link_students=payload.link_students,
        students_per_teacher=payload.students_per_teacher,
    )
    return success(report.as_dict(), "Import finished")
