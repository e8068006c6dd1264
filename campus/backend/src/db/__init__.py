"""Database session management utilities."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from fastapi import Request
from sqlalchemy.orm import Session, sessionmaker

from ..models.base import Base

if TYPE_CHECKING:
    from ..core.context import AppContext


@contextmanager
def get_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """Context manager yielding a SQLAlchemy session."""

    db = session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the context mounted on the application."""

    return request.app.state.context


def get_session_dependency(request: Request) -> Iterator[Session]:
    """FastAPI dependency wrapping :func:`get_session`."""

    with get_session(get_context(request).session_factory) as session:
        yield session


@contextmanager
def session_scope(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """Provide a transactional scope for scripts and background workers."""

    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(context: AppContext) -> None:
    """Create every table known to the declarative base."""

    # Registers the mapped classes on Base.metadata.
    from .. import models  # noqa: F401

    Base.metadata.create_all(bind=context.engine)


__all__ = [
    "Base",
    "get_context",
    "get_session",
    "get_session_dependency",
    "init_db",
    "session_scope",
]
