"""Field-constraint validation run before any write reaches the store."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from ..core.exceptions import ValidationFailed

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def describe_errors(
    errors: Iterable[Mapping[str, Any]], *, drop_prefix: tuple[str, ...] = ()
) -> list[dict[str, Any]]:
    """Flatten pydantic error dicts into ``{field, message, type}`` entries.

    A location starting with ``drop_prefix`` loses it, unless nothing would
    be left to name the field.
    """

    described: list[dict[str, Any]] = []
    for error in errors:
        location = tuple(str(part) for part in error.get("loc", ()))
        if drop_prefix and location[: len(drop_prefix)] == drop_prefix and len(location) > len(drop_prefix):
            location = location[len(drop_prefix) :]
        described.append(
            {
                "field": ".".join(location) or "__root__",
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type", "value_error"),
            }
        )
    return described


def validate_payload(schema: type[SchemaT], data: Mapping[str, Any]) -> SchemaT:
    """Validate ``data`` against ``schema`` or raise :class:`ValidationFailed`."""

    try:
        return schema.model_validate(dict(data))
    except ValidationError as exc:
        raise ValidationFailed(describe_errors(exc.errors())) from exc


__all__ = ["describe_errors", "validate_payload"]
