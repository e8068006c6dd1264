"""Teacher schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

USERNAME_PATTERN = r"^[A-Za-z0-9_.-]{3,50}$"


class TeacherWrite(BaseModel):
    """Full set of writable teacher fields, validated on create and update."""

    username: str = Field(pattern=USERNAME_PATTERN)
    password: str = Field(min_length=6, max_length=255)
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr | None = None
    subject: str | None = Field(default=None, max_length=100)

    model_config = ConfigDict(str_strip_whitespace=True)


class TeacherRead(BaseModel):
    """Public teacher representation; the password hash is never exposed."""

    id: int
    username: str
    name: str
    email: str | None
    subject: str | None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


__all__ = ["TeacherRead", "TeacherWrite", "USERNAME_PATTERN"]
