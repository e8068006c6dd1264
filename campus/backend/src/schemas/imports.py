"""Bulk import payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ImportRequest(BaseModel):
    """Raw teacher and student rows plus optional linking overrides."""

    teachers: list[dict[str, Any]] = Field(default_factory=list)
    students: list[dict[str, Any]] = Field(default_factory=list)
    link_students: bool | None = None
    students_per_teacher: int | None = Field(default=None, ge=0)


__all__ = ["ImportRequest"]
