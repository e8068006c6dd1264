"""Credential helpers and the request authentication gate."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from .config import Settings
from .exceptions import AlreadyAuthenticated, Unauthorized

LOGGER = structlog.get_logger(__name__)

_scheme = HTTPBearer(auto_error=False)
_pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


# -------------------------------------------------------
# Passwords
# -------------------------------------------------------

def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    try:
        return _pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Stored value is not a recognised hash.
        return False


# -------------------------------------------------------
# Tokens
# -------------------------------------------------------

@dataclass(frozen=True)
class Identity:
    """Principal resolved from a validated bearer credential."""

    subject: int
    username: str
    role: str
    expires_at: datetime | None = None


def create_access_token(
    *,
    subject: int,
    username: str,
    role: str,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a bearer credential for ``subject``."""

    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims = {"sub": str(subject), "username": username, "role": role, "exp": expire}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> Identity:
    """Validate ``token`` and return the embedded :class:`Identity`."""

    try:
        payload: dict[str, Any] = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except ExpiredSignatureError as exc:
        raise Unauthorized("Token expired") from exc
    except JWTError as exc:
        raise Unauthorized("Invalid token") from exc

    subject = payload.get("sub")
    username = payload.get("username")
    role = payload.get("role")
    if not subject or not username or not role:
        raise Unauthorized("Token missing subject")
    try:
        subject_id = int(subject)
    except (TypeError, ValueError) as exc:
        raise Unauthorized("Token missing subject") from exc

    exp = payload.get("exp")
    expires_at = datetime.fromtimestamp(exp, tz=timezone.utc) if isinstance(exp, (int, float)) else None
    return Identity(subject=subject_id, username=username, role=role, expires_at=expires_at)


def _extract_token(
    request: Request, credentials: HTTPAuthorizationCredentials | None, settings: Settings
) -> str | None:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.session_cookie_name) or None


# -------------------------------------------------------
# Gate dependencies
# -------------------------------------------------------

def require_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_scheme),
) -> Identity:
    """Reject the request unless it carries a valid credential.

    On success the identity is attached to ``request.state.identity`` for the
    downstream handlers of this request.
    """

    settings: Settings = request.app.state.context.settings
    token = _extract_token(request, credentials, settings)
    if token is None:
        raise Unauthorized("Authorization header missing")

    identity = decode_access_token(token, settings)
    request.state.identity = identity
    return identity


def redirect_if_logged_in(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_scheme),
) -> None:
    """Non-blocking check used by the login view.

    A caller that already holds a valid credential is redirected to the
    dashboard; anyone else passes through untouched.
    """

    settings: Settings = request.app.state.context.settings
    token = _extract_token(request, credentials, settings)
    if token is None:
        return
    try:
        identity = decode_access_token(token, settings)
    except Unauthorized:
        return
    LOGGER.debug("login_view_skipped", username=identity.username)
    raise AlreadyAuthenticated(settings.dashboard_path)


__all__ = [
    "Identity",
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "redirect_if_logged_in",
    "require_identity",
    "verify_password",
]
