"""Login, logout and current-identity endpoints."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from ..core.exceptions import Unauthorized
from ..core.security import (
    Identity,
    create_access_token,
    redirect_if_logged_in,
    require_identity,
    verify_password,
)
from ..db import get_context, get_session_dependency
from ..models import Student, Teacher
from ..schemas.auth import IdentityRead, LoginRequest, Token
from ..schemas.envelope import success
from ..services.record_store import RecordStore

LOGGER = structlog.get_logger(__name__)

router = APIRouter(tags=["auth"])
identity_router = APIRouter(tags=["auth"])


def _authenticate(session: Session, username: str, password: str) -> tuple[Teacher | Student, str]:
    """Return the account matching the credentials and its role."""

    for model, role in ((Teacher, "teacher"), (Student, "student")):
        account = RecordStore(session, model).find_by(username=username)
        if account is not None:
            if verify_password(password, account.password):
                return account, role
            break
    raise Unauthorized("Incorrect username or password")


@router.post("/login", response_model=Token)
def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    session: Session = Depends(get_session_dependency),
) -> Token:
    """Exchange a username and password for a bearer credential.

    The credential is returned in the body and also stored in the session
    cookie so browser clients are authenticated on later requests.
    """

    settings = get_context(request).settings
    account, role = _authenticate(session, payload.username, payload.password)
    token = create_access_token(
        subject=account.id,
        username=account.username,
        role=role,
        settings=settings,
    )
    response.set_cookie(
        settings.session_cookie_name,
        token,
        httponly=True,
        samesite="lax",
        max_age=settings.access_token_expire_minutes * 60,
    )
    LOGGER.info("login_succeeded", username=account.username, role=role)
    return Token(access_token=token)


@router.get("/logout")
def logout(request: Request, response: Response) -> dict[str, Any]:
    """Clear the session cookie."""

    response.delete_cookie(get_context(request).settings.session_cookie_name)
    return success(None, "Logged out")


@router.get("/login", dependencies=[Depends(redirect_if_logged_in)])
def login_view() -> dict[str, Any]:
    """Describe the login form; callers with a live session are redirected."""

    return {
        "action": "/login",
        "method": "POST",
        "fields": ["username", "password"],
    }


@identity_router.get("/me", response_model=IdentityRead)
def read_current_identity(identity: Identity = Depends(require_identity)) -> IdentityRead:
    """Return the identity attached to this request by the auth gate."""

    return IdentityRead(
        subject=identity.subject,
        username=identity.username,
        role=identity.role,
        expires_at=identity.expires_at,
    )
