"""Dashboard summary endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..core.security import Identity, require_identity
from ..db import get_session_dependency
from ..models import Attendance, Student, Teacher

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("")
def get_dashboard(
    session: Session = Depends(get_session_dependency),
    identity: Identity = Depends(require_identity),
) -> dict[str, object]:
    """Return record counts, plus the caller's own roster size for teachers."""

    summary: dict[str, object] = {
        "teachers": session.scalar(select(func.count()).select_from(Teacher)) or 0,
        "students": session.scalar(select(func.count()).select_from(Student)) or 0,
        "attendance": session.scalar(select(func.count()).select_from(Attendance)) or 0,
        "username": identity.username,
        "role": identity.role,
    }
    if identity.role == "teacher":
        summary["my_students"] = (
            session.scalar(
                select(func.count()).select_from(Student).where(Student.teacher_id == identity.subject)
            )
            or 0
        )
    return summary
