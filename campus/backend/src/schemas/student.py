"""Student schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from .teacher import USERNAME_PATTERN


class StudentWrite(BaseModel):
    """Writable student fields."""

    name: str = Field(min_length=1, max_length=255)
    enrollment_no: int = Field(gt=0)
    roll: str | None = Field(default=None, max_length=32)
    username: str | None = Field(default=None, pattern=USERNAME_PATTERN)
    password: str | None = Field(default=None, min_length=6, max_length=255)
    email: EmailStr | None = None
    teacher_id: int | None = Field(default=None, gt=0)

    model_config = ConfigDict(str_strip_whitespace=True)

    @model_validator(mode="after")
    def _credentials_come_in_pairs(self) -> "StudentWrite":
        if self.username and not self.password:
            raise ValueError("password is required when username is set")
        return self


class StudentRead(BaseModel):
    """Public student representation."""

    id: int
    name: str
    enrollment_no: int
    roll: str | None
    username: str | None
    email: str | None
    teacher_id: int | None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


__all__ = ["StudentRead", "StudentWrite"]
