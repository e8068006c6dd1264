"""Liveness, readiness and metrics endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy import inspect, text
from sqlalchemy.orm import Session

from ..core.context import AppContext
from ..db import get_context, get_session_dependency
from ..models.base import Base

router = APIRouter(tags=["health"])


@router.get("/health/live")
def liveness(context: AppContext = Depends(get_context)) -> dict[str, str]:
    return {"status": "live", "app": context.settings.app_name}


@router.get("/health/ready", response_model=None)
def readiness(session: Session = Depends(get_session_dependency)) -> dict[str, str] | JSONResponse:
    """Ready once the store answers and every campus table exists."""

    session.execute(text("SELECT 1"))
    present = set(inspect(session.get_bind()).get_table_names())
    missing = sorted(set(Base.metadata.tables) - present)
    if missing:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "missing_tables": missing},
        )
    return {"status": "ready"}


@router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    """Expose Prometheus metrics."""

    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
