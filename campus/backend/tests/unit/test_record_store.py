"""Tests for the typed record store."""

from __future__ import annotations

import os
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[4]))

os.environ.setdefault("APP_ENV", "test")

import pytest
from sqlalchemy import text

from campus.backend.src.core.config import Settings
from campus.backend.src.core.context import AppContext, build_context
from campus.backend.src.core.exceptions import RecordNotFound, UniquenessConflict, ValidationFailed
from campus.backend.src.db import get_session, init_db
from campus.backend.src.models import Teacher
from campus.backend.src.schemas.teacher import TeacherWrite
from campus.backend.src.services.record_store import RecordStore
from campus.backend.src.services.resources import TEACHER_RESOURCE
from campus.backend.src.services.validation import validate_payload


@pytest.fixture()
def context(tmp_path: Path) -> AppContext:  # type: ignore[no-untyped-def]
    ctx = build_context(Settings(database_url=f"sqlite:///{tmp_path / 'campus.db'}"))
    init_db(ctx)
    yield ctx
    ctx.dispose()


def _teacher(username: str) -> Teacher:
    return Teacher(username=username, password="hashed", name=username.title())


def test_save_assigns_key_and_find_returns_record(context: AppContext) -> None:
    with get_session(context.session_factory) as session:
        store = RecordStore(session, Teacher)
        saved = store.save(_teacher("amelia"))

        assert saved.id is not None
        assert saved.created_at is not None
        assert store.find_one_or_fail(saved.id).username == "amelia"
        assert store.find_by(username="amelia") is saved
        assert store.find_by(username="missing") is None


def test_find_all_orders_by_key(context: AppContext) -> None:
    with get_session(context.session_factory) as session:
        store = RecordStore(session, Teacher)
        for username in ("carl", "bea", "abe"):
            store.save(_teacher(username))

        assert [teacher.username for teacher in store.find_all()] == ["carl", "bea", "abe"]


def test_unknown_key_raises_not_found(context: AppContext) -> None:
    with get_session(context.session_factory) as session:
        store = RecordStore(session, Teacher, "Teacher")
        with pytest.raises(RecordNotFound) as excinfo:
            store.find_one_or_fail(404)

    assert excinfo.value.key == 404
    assert str(excinfo.value) == "Teacher not found"


def test_conflicting_save_leaves_store_unchanged(context: AppContext) -> None:
    with get_session(context.session_factory) as session:
        store = RecordStore(session, Teacher)
        store.save(_teacher("dora"))

        with pytest.raises(UniquenessConflict) as excinfo:
            store.save(_teacher("dora"))
        assert "UNIQUE" in excinfo.value.message

        # The session is usable again after the rejected write.
        assert [teacher.username for teacher in store.find_all()] == ["dora"]
        store.save(_teacher("eli"))
        assert len(store.find_all()) == 2


def test_delete_removes_record(context: AppContext) -> None:
    with get_session(context.session_factory) as session:
        store = RecordStore(session, Teacher)
        record = store.save(_teacher("fay"))
        store.delete(record.id)

        with pytest.raises(RecordNotFound):
            store.find_one_or_fail(record.id)
        with pytest.raises(RecordNotFound):
            store.delete(record.id)


def test_validate_payload_lists_each_violation() -> None:
    with pytest.raises(ValidationFailed) as excinfo:
        validate_payload(TeacherWrite, {"username": "a b", "password": "short"})

    fields = {error["field"] for error in excinfo.value.errors}
    assert fields == {"username", "password", "name"}
    assert all(error["message"] for error in excinfo.value.errors)


def test_descriptor_build_hashes_password_and_drops_unknown_fields() -> None:
    teacher = TEACHER_RESOURCE.build(
        {
            "id": 99,
            "username": "gus",
            "password": "plain-secret",
            "name": "Gus",
            "role": "admin",
        }
    )

    assert isinstance(teacher, Teacher)
    assert teacher.id is None
    assert teacher.password != "plain-secret"
    assert teacher.password.startswith("$pbkdf2-sha256$")


def test_sqlite_connections_enforce_foreign_keys(context: AppContext) -> None:
    with get_session(context.session_factory) as session:
        assert session.execute(text("PRAGMA foreign_keys")).scalar() == 1
