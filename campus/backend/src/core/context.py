"""Explicit application context passed down to routers and background work."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from campus.backend.src.core.config import Settings, get_settings
from campus.backend.src.db.session import build_engine, build_session_factory


@dataclass(frozen=True)
class AppContext:
    """Store handle and configuration for one application instance."""

    settings: Settings
    engine: Engine
    session_factory: sessionmaker[Session]

    def dispose(self) -> None:
        """Release pooled connections held by the engine."""

        self.engine.dispose()


def build_context(settings: Settings | None = None) -> AppContext:
    """Construct an :class:`AppContext` from ``settings`` (or the environment)."""

    resolved = settings or get_settings()
    engine = build_engine(resolved.database_url)
    return AppContext(
        settings=resolved,
        engine=engine,
        session_factory=build_session_factory(engine),
    )


__all__ = ["AppContext", "build_context"]
