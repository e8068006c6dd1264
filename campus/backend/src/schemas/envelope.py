"""Response envelope shared by list, get and create responses."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel


class Envelope(BaseModel):
    """``{status, message, error, data}`` body returned by non-void endpoints."""

    status: Literal["success", "fail"]
    message: str
    error: bool | dict[str, Any]
    data: Any


def success(data: Any, message: str) -> dict[str, Any]:
    """Return a success envelope around ``data``."""

    return Envelope(status="success", message=message, error=False, data=data).model_dump(mode="json")


def failure(message: str, error: dict[str, Any]) -> dict[str, Any]:
    """Return a soft-failure envelope; ``data`` is always ``False``."""

    return Envelope(status="fail", message=message, error=error, data=False).model_dump(mode="json")


__all__ = ["Envelope", "failure", "success"]
