"""Tests for login, logout and the bearer-token gate."""

from __future__ import annotations

import os
import sys
from datetime import timedelta
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[4]))

os.environ.setdefault("APP_ENV", "test")

import pytest
from fastapi.testclient import TestClient

from campus.backend.src.api import teachers as teachers_api
from campus.backend.src.core.config import Settings
from campus.backend.src.core.context import AppContext, build_context
from campus.backend.src.core.security import create_access_token, decode_access_token, hash_password
from campus.backend.src.db import init_db, session_scope
from campus.backend.src.main import create_app
from campus.backend.src.models import Student, Teacher


def _settings(tmp_path: Path, **overrides: object) -> Settings:
    values: dict[str, object] = {
        "database_url": f"sqlite:///{tmp_path / 'campus.db'}",
        "jwt_secret": "test-secret",
        "app_env": "test",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture()
def context(tmp_path: Path) -> AppContext:  # type: ignore[no-untyped-def]
    ctx = build_context(_settings(tmp_path))
    init_db(ctx)
    yield ctx
    ctx.dispose()


@pytest.fixture()
def client(context: AppContext) -> TestClient:
    return TestClient(create_app(context))


@pytest.fixture()
def accounts(context: AppContext) -> dict[str, int]:
    with session_scope(context.session_factory) as session:
        teacher = Teacher(
            username="mrsmith",
            password=hash_password("chalkboard"),
            name="John Smith",
            email="smith@school.example",
        )
        student = Student(
            name="Amy Pond",
            enrollment_no=501,
            username="amy",
            password=hash_password("notebook"),
        )
        session.add_all([teacher, student])
        session.flush()
        return {"teacher": teacher.id, "student": student.id}


def _bearer(context: AppContext, **overrides: object) -> dict[str, str]:
    claims: dict[str, object] = {"subject": 1, "username": "mrsmith", "role": "teacher"}
    claims.update(overrides)
    token = create_access_token(settings=context.settings, **claims)  # type: ignore[arg-type]
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.parametrize(
    "path",
    ["/api/teachers", "/api/students", "/api/attendance", "/api/dashboard", "/api/me"],
)
def test_protected_routes_reject_missing_token(client: TestClient, path: str) -> None:
    response = client.get(path)
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.parametrize("credential", ["missing", "expired", "tampered"])
def test_rejected_token_never_reaches_controller(
    client: TestClient, context: AppContext, monkeypatch: pytest.MonkeyPatch, credential: str
) -> None:
    calls: list[object] = []
    monkeypatch.setattr(teachers_api.controller, "list", lambda session: calls.append(session))

    headers: dict[str, str] = {}
    if credential == "expired":
        headers = _bearer(context, expires_delta=timedelta(seconds=-1))
    elif credential == "tampered":
        header, payload, signature = _bearer(context)["Authorization"].split(".")
        headers = {"Authorization": ".".join([header, payload, signature[::-1]])}

    response = client.get("/api/teachers", headers=headers)
    assert response.status_code == 401
    assert calls == []


def test_valid_token_reaches_controller(
    client: TestClient, context: AppContext, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls: list[object] = []

    def _list(session: object) -> dict[str, object]:
        calls.append(session)
        return {"status": "success", "message": "Data Found", "error": False, "data": []}

    monkeypatch.setattr(teachers_api.controller, "list", _list)

    response = client.get("/api/teachers", headers=_bearer(context))
    assert response.status_code == 200
    assert len(calls) == 1


def test_expired_token_is_rejected(client: TestClient, context: AppContext) -> None:
    headers = _bearer(context, expires_delta=timedelta(minutes=-5))
    response = client.get("/api/teachers", headers=headers)
    assert response.status_code == 401
    assert response.json()["detail"] == "Token expired"


def test_token_signed_with_other_secret_is_rejected(
    client: TestClient, context: AppContext
) -> None:
    forged = create_access_token(
        subject=1,
        username="mrsmith",
        role="teacher",
        settings=context.settings.model_copy(update={"jwt_secret": "someone-else"}),
    )
    response = client.get("/api/teachers", headers={"Authorization": f"Bearer {forged}"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


def test_garbage_token_is_rejected(client: TestClient) -> None:
    response = client.get("/api/students", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_valid_token_attaches_identity(client: TestClient, context: AppContext) -> None:
    response = client.get("/api/me", headers=_bearer(context, subject=42, username="ms_jones"))
    assert response.status_code == 200
    body = response.json()
    assert body["subject"] == 42
    assert body["username"] == "ms_jones"
    assert body["role"] == "teacher"
    assert body["expires_at"] is not None


def test_decode_round_trips_claims(context: AppContext) -> None:
    token = create_access_token(subject=7, username="amy", role="student", settings=context.settings)
    identity = decode_access_token(token, context.settings)
    assert (identity.subject, identity.username, identity.role) == (7, "amy", "student")


def test_teacher_login_issues_token_and_cookie(
    client: TestClient, context: AppContext, accounts: dict[str, int]
) -> None:
    response = client.post("/login", json={"username": "mrsmith", "password": "chalkboard"})
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert context.settings.session_cookie_name in response.cookies

    identity = decode_access_token(body["access_token"], context.settings)
    assert identity.subject == accounts["teacher"]
    assert identity.role == "teacher"

    me = client.get("/api/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.json()["username"] == "mrsmith"


def test_student_login_resolves_student_role(
    client: TestClient, context: AppContext, accounts: dict[str, int]
) -> None:
    response = client.post("/login", json={"username": "amy", "password": "notebook"})
    assert response.status_code == 200

    identity = decode_access_token(response.json()["access_token"], context.settings)
    assert identity.subject == accounts["student"]
    assert identity.role == "student"


@pytest.mark.parametrize(
    ("username", "password"),
    [("mrsmith", "wrong-password"), ("nobody", "chalkboard"), ("amy", "chalkboard")],
)
def test_bad_credentials_are_rejected(
    client: TestClient, accounts: dict[str, int], username: str, password: str
) -> None:
    response = client.post("/login", json={"username": username, "password": password})
    assert response.status_code == 401
    assert response.json()["detail"] == "Incorrect username or password"


def test_session_cookie_authenticates_until_logout(
    client: TestClient, accounts: dict[str, int]
) -> None:
    login = client.post("/login", json={"username": "mrsmith", "password": "chalkboard"})
    assert login.status_code == 200

    assert client.get("/api/me").status_code == 200

    logout = client.get("/logout")
    assert logout.status_code == 200
    assert logout.json()["message"] == "Logged out"

    assert client.get("/api/me").status_code == 401


def test_login_view_redirects_logged_in_caller(client: TestClient, context: AppContext) -> None:
    response = client.get("/login", headers=_bearer(context), follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == context.settings.dashboard_path


def test_login_view_serves_anonymous_caller(client: TestClient) -> None:
    response = client.get("/login", follow_redirects=False)
    assert response.status_code == 200
    assert response.json()["fields"] == ["username", "password"]


def test_login_view_ignores_expired_token(client: TestClient, context: AppContext) -> None:
    headers = _bearer(context, expires_delta=timedelta(minutes=-1))
    response = client.get("/login", headers=headers, follow_redirects=False)
    assert response.status_code == 200


def test_dev_route_is_absent_outside_dev(client: TestClient) -> None:
    response = client.post(
        "/api/dev/teachers",
        json={"username": "first", "password": "bootstrap", "name": "First Teacher"},
    )
    assert response.status_code == 404


def test_dev_route_bootstraps_first_teacher(tmp_path: Path) -> None:
    ctx = build_context(_settings(tmp_path, app_env="development"))
    init_db(ctx)
    try:
        client = TestClient(create_app(ctx))
        response = client.post(
            "/api/dev/teachers",
            json={"username": "first", "password": "bootstrap", "name": "First Teacher"},
        )
        assert response.status_code == 201

        login = client.post("/login", json={"username": "first", "password": "bootstrap"})
        assert login.status_code == 200
    finally:
        ctx.dispose()
