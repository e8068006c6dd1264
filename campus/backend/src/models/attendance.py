"""Attendance model."""

from __future__ import annotations

import datetime as dt

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

ATTENDANCE_STATUSES: tuple[str, ...] = ("present", "absent", "late", "excused")


class Attendance(Base):
    """A single attendance mark for one student on one day."""

    __tablename__ = "attendance"
    __table_args__ = (
        CheckConstraint(
            f"status IN ({', '.join(repr(value) for value in ATTENDANCE_STATUSES)})",
            name="status_valid",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    student: Mapped["Student"] = relationship("Student", back_populates="attendance")


__all__ = ["ATTENDANCE_STATUSES", "Attendance"]
