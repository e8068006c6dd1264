"""Field/validation descriptors for each record kind."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from pydantic import BaseModel

from ..core.security import hash_password
from ..models import Attendance, Student, Teacher
from ..models.base import Base
from ..schemas.attendance import AttendanceRead, AttendanceWrite
from ..schemas.student import StudentRead, StudentWrite
from ..schemas.teacher import TeacherRead, TeacherWrite
from .validation import validate_payload


@dataclass(frozen=True)
class ResourceDescriptor:
    """Describes how one record kind is validated, prepared and serialized."""

    model: type[Base]
    label: str
    write_schema: type[BaseModel]
    read_schema: type[BaseModel]
    secret_fields: frozenset[str] = field(default_factory=frozenset)

    @property
    def writable_fields(self) -> tuple[str, ...]:
        return tuple(self.write_schema.model_fields)

    def pick(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        """Return only the writable fields present in ``payload``."""

        return {key: value for key, value in payload.items() if key in self.write_schema.model_fields}

    def prepare(self, values: dict[str, Any], provided: Mapping[str, Any]) -> dict[str, Any]:
        """Hash secrets supplied by the caller; stored hashes pass through."""

        for name in self.secret_fields:
            if name in provided and values.get(name) is not None:
                values[name] = hash_password(values[name])
        return values

    def build(self, payload: Mapping[str, Any]) -> Base:
        """Validate ``payload`` and return an unsaved model instance.

        Raises :class:`~campus.backend.src.core.exceptions.ValidationFailed`
        without touching the store.
        """

        provided = self.pick(payload)
        candidate = validate_payload(self.write_schema, provided)
        return self.model(**self.prepare(candidate.model_dump(), provided))

    def serialize(self, record: Base) -> dict[str, Any]:
        return self.read_schema.model_validate(record).model_dump(mode="json")


TEACHER_RESOURCE = ResourceDescriptor(
    model=Teacher,
    label="Teacher",
    write_schema=TeacherWrite,
    read_schema=TeacherRead,
    secret_fields=frozenset({"password"}),
)

STUDENT_RESOURCE = ResourceDescriptor(
    model=Student,
    label="Student",
    write_schema=StudentWrite,
    read_schema=StudentRead,
    secret_fields=frozenset({"password"}),
)

ATTENDANCE_RESOURCE = ResourceDescriptor(
    model=Attendance,
    label="Attendance",
    write_schema=AttendanceWrite,
    read_schema=AttendanceRead,
)


__all__ = [
    "ATTENDANCE_RESOURCE",
    "ResourceDescriptor",
    "STUDENT_RESOURCE",
    "TEACHER_RESOURCE",
]
