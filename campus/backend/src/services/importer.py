"""Bulk import of teacher and student rows with student-to-teacher linking.

The import is best-effort and restartable: every teacher row is saved on its
own, a teacher that already exists is skipped, and each saved teacher gets up
to ``students_per_teacher`` freshly numbered students. Nothing is rolled back
and no single failure aborts the batch. Every attempted record ends up in the
returned :class:`ImportReport`.
"""

from __future__ import annotations

import asyncio
import threading
import time
from dataclasses import asdict, dataclass, field
from itertools import islice
from typing import Any, Iterable, Literal, Mapping, Sequence

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.context import AppContext
from ..core.exceptions import DomainError, UniquenessConflict, ValidationFailed
from ..db import get_session
from ..models import Student
from .metrics import import_duration_seconds, import_records_total
from .record_store import RecordStore
from .resources import STUDENT_RESOURCE, TEACHER_RESOURCE

LOGGER = structlog.get_logger(__name__)

# Identity and enrollment columns that imported rows may not carry over.
DISCARDED_STUDENT_FIELDS: tuple[str, ...] = ("id", "name", "enrollment_no", "username", "teacher_id")

OutcomeStatus = Literal["created", "skipped", "failed"]


@dataclass
class RecordOutcome:
    """Result of one attempted teacher or student save."""

    kind: Literal["teacher", "student"]
    reference: str
    status: OutcomeStatus
    record_id: int | None = None
    teacher_id: int | None = None
    error: str | None = None


@dataclass
class ImportReport:
    """Per-record outcomes of one import run."""

    outcomes: list[RecordOutcome] = field(default_factory=list)

    @property
    def teachers_created(self) -> int:
        return sum(1 for o in self.outcomes if o.kind == "teacher" and o.status == "created")

    @property
    def students_linked(self) -> int:
        return sum(1 for o in self.outcomes if o.kind == "student" and o.status == "created")

    @property
    def failures(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "failed")

    def as_dict(self) -> dict[str, Any]:
        return {
            "teachers_created": self.teachers_created,
            "students_linked": self.students_linked,
            "failures": self.failures,
            "outcomes": [asdict(outcome) for outcome in self.outcomes],
        }


class EnrollmentAllocator:
    """Hands out unique, increasing enrollment numbers for one import run."""

    def __init__(self, start: int) -> None:
        self._next = max(start, 1)
        self._lock = threading.Lock()

    def allocate(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value

    @classmethod
    def from_store(cls, session: Session) -> "EnrollmentAllocator":
        """Start after the highest enrollment number already stored."""

        highest = session.scalar(select(func.max(Student.enrollment_no)))
        return cls((highest or 0) + 1)


def _describe_error(exc: Exception) -> str:
    if isinstance(exc, ValidationFailed):
        return "; ".join(f"{error['field']}: {error['message']}" for error in exc.errors)
    return str(exc)


def _teacher_reference(index: int, row: Mapping[str, Any]) -> str:
    username = row.get("username")
    return str(username) if username else f"teachers[{index}]"


def _link_student(
    store: RecordStore,
    row: Mapping[str, Any],
    position: int,
    teacher_id: int,
    allocator: EnrollmentAllocator,
) -> RecordOutcome:
    """Save one student row as a fresh record owned by ``teacher_id``."""

    candidate = {key: value for key, value in row.items() if key not in DISCARDED_STUDENT_FIELDS}
    number = allocator.allocate()
    candidate.update(name=f"A-{number}", enrollment_no=number, teacher_id=teacher_id)
    reference = f"students[{position}]"

    try:
        student = store.save(STUDENT_RESOURCE.build(candidate))
    except (DomainError, SQLAlchemyError) as exc:
        if isinstance(exc, SQLAlchemyError):
            store.session.rollback()
        LOGGER.warning(
            "student_link_failed",
            teacher_id=teacher_id,
            reference=reference,
            error=_describe_error(exc),
        )
        return RecordOutcome(
            kind="student",
            reference=reference,
            status="failed",
            teacher_id=teacher_id,
            error=_describe_error(exc),
        )

    return RecordOutcome(
        kind="student",
        reference=reference,
        status="created",
        record_id=student.id,
        teacher_id=teacher_id,
    )


def _import_teacher(
    context: AppContext,
    index: int,
    row: Mapping[str, Any],
    student_rows: Sequence[Mapping[str, Any]],
    *,
    link_students: bool,
    students_per_teacher: int,
    allocator: EnrollmentAllocator,
) -> list[RecordOutcome]:
    """Save one teacher, then link its bounded share of students.

    Runs in a worker thread with a session of its own.
    """

    reference = _teacher_reference(index, row)
    outcomes: list[RecordOutcome] = []

    with get_session(context.session_factory) as session:
        teachers = RecordStore(session, TEACHER_RESOURCE.model, TEACHER_RESOURCE.label)
        try:
            teacher = teachers.save(TEACHER_RESOURCE.build(row))
        except UniquenessConflict as exc:
            # Already imported on an earlier run.
            LOGGER.info("teacher_import_skipped", reference=reference, reason=exc.message)
            return [RecordOutcome(kind="teacher", reference=reference, status="skipped", error=exc.message)]
        except (DomainError, SQLAlchemyError) as exc:
            if isinstance(exc, SQLAlchemyError):
                session.rollback()
            LOGGER.warning("teacher_import_failed", reference=reference, error=_describe_error(exc))
            return [
                RecordOutcome(kind="teacher", reference=reference, status="failed", error=_describe_error(exc))
            ]

        outcomes.append(
            RecordOutcome(
                kind="teacher",
                reference=reference,
                status="created",
                record_id=teacher.id,
                teacher_id=teacher.id,
            )
        )
        if not link_students:
            return outcomes

        students = RecordStore(session, STUDENT_RESOURCE.model, STUDENT_RESOURCE.label)
        for position, student_row in enumerate(islice(student_rows, students_per_teacher)):
            outcomes.append(_link_student(students, student_row, position, teacher.id, allocator))

    return outcomes


def _record_metrics(report: ImportReport) -> None:
    for outcome in report.outcomes:
        import_records_total.labels(kind=outcome.kind, outcome=outcome.status).inc()


async def import_records(
    context: AppContext,
    teacher_rows: Iterable[Mapping[str, Any]],
    student_rows: Iterable[Mapping[str, Any]],
    *,
    link_students: bool | None = None,
    students_per_teacher: int | None = None,
    concurrency: int | None = None,
) -> ImportReport:
    """Import ``teacher_rows`` and link ``student_rows`` to each saved teacher.

    One task is spawned per teacher row (at most ``concurrency`` at a time)
    and all of them are joined before this coroutine returns, so the report
    is complete when the caller gets it. Teachers run in no particular order
    relative to each other.
    """

    settings = context.settings
    link = settings.import_link_students if link_students is None else link_students
    cap = settings.import_students_per_teacher if students_per_teacher is None else students_per_teacher
    limit = asyncio.Semaphore(concurrency or settings.import_concurrency)

    teachers = [dict(row) for row in teacher_rows]
    students = [dict(row) for row in student_rows]
    started = time.perf_counter()

    def _allocator() -> EnrollmentAllocator:
        with get_session(context.session_factory) as session:
            return EnrollmentAllocator.from_store(session)

    allocator = await asyncio.to_thread(_allocator)

    async def _run(index: int, row: Mapping[str, Any]) -> list[RecordOutcome]:
        async with limit:
            return await asyncio.to_thread(
                _import_teacher,
                context,
                index,
                row,
                students,
                link_students=link,
                students_per_teacher=max(cap, 0),
                allocator=allocator,
            )

    batches = await asyncio.gather(*(_run(index, row) for index, row in enumerate(teachers)))
    report = ImportReport(outcomes=[outcome for batch in batches for outcome in batch])

    _record_metrics(report)
    import_duration_seconds.observe(time.perf_counter() - started)
    LOGGER.info(
        "import_finished",
        teachers=len(teachers),
        teachers_created=report.teachers_created,
        students_linked=report.students_linked,
        failures=report.failures,
    )
    return report


__all__ = [
    "DISCARDED_STUDENT_FIELDS",
    "EnrollmentAllocator",
    "ImportReport",
    "RecordOutcome",
    "import_records",
]
