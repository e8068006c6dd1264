"""Seed the development database from teachers.csv and students.csv."""

import asyncio
import os

from campus.backend.src.core.config import get_settings
from campus.backend.src.core.context import build_context
from campus.backend.src.core.logging import configure_logging
from campus.backend.src.db import init_db
from campus.backend.src.services.import_files import load_rows
from campus.backend.src.services.importer import import_records


def main() -> None:
    """Create tables (if needed) and import the CSV rows.

    Linking and the per-teacher student count come from
    ``IMPORT_LINK_STUDENTS`` and ``IMPORT_STUDENTS_PER_TEACHER``.
    """

    teachers_path = os.environ.get("IMPORT_TEACHERS_CSV", "teachers.csv")
    students_path = os.environ.get("IMPORT_STUDENTS_CSV", "students.csv")

    settings = get_settings()
    configure_logging(settings.log_level)
    context = build_context(settings)
    init_db(context)

    report = asyncio.run(
        import_records(context, load_rows(teachers_path), load_rows(students_path))
    )
    context.dispose()

    print("✅ Development data ready!")
    print(f"Teachers created: {report.teachers_created}")
    print(f"Students linked: {report.students_linked}")
    if report.failures:
        print(f"Failures: {report.failures}")
        for outcome in report.outcomes:
            if outcome.status == "failed":
                print(f"  {outcome.kind} {outcome.reference}: {outcome.error}")


if __name__ == "__main__":
    main()
