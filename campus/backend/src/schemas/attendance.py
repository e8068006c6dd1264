"""Attendance schemas."""

from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

AttendanceStatus = Literal["present", "absent", "late", "excused"]


class AttendanceWrite(BaseModel):
    student_id: int = Field(gt=0)
    date: dt.date
    status: AttendanceStatus
    remarks: str | None = None

    model_config = ConfigDict(str_strip_whitespace=True)


class AttendanceRead(BaseModel):
    id: int
    student_id: int
    date: dt.date
    status: str
    remarks: str | None
    created_at: dt.datetime | None = None

    model_config = ConfigDict(from_attributes=True)


__all__ = ["AttendanceRead", "AttendanceStatus", "AttendanceWrite"]
