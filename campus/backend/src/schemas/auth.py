"""Authentication payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials exchanged for a session token."""

    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class IdentityRead(BaseModel):
    """The principal attached to the current request."""

    subject: int
    username: str
    role: str
    expires_at: datetime | None = None


__all__ = ["IdentityRead", "LoginRequest", "Token"]
