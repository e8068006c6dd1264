"""Map domain errors to HTTP responses."""

from __future__ import annotations

import traceback

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse

from ..core.exceptions import (
    AlreadyAuthenticated,
    RecordNotFound,
    Unauthorized,
    UniquenessConflict,
    ValidationFailed,
)
from ..services.validation import describe_errors

LOGGER = structlog.get_logger(__name__)


async def _not_found(_: Request, exc: RecordNotFound) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc), "key": exc.key},
    )


async def _validation_failed(_: Request, exc: ValidationFailed) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.errors})


async def _request_invalid(_: Request, exc: RequestValidationError) -> JSONResponse:
    # Raised before any handler runs, e.g. a body that is not a JSON object.
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": describe_errors(exc.errors(), drop_prefix=("body",))},
    )


async def _uniqueness_conflict(_: Request, exc: UniquenessConflict) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": f"Value already in use: {exc.message}"},
    )


async def _unauthorized(_: Request, exc: Unauthorized) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": exc.detail},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _already_authenticated(_: Request, exc: AlreadyAuthenticated) -> RedirectResponse:
    return RedirectResponse(exc.location, status_code=status.HTTP_303_SEE_OTHER)


async def _unhandled(request: Request, exc: Exception) -> PlainTextResponse:
    LOGGER.error("unhandled_error", path=request.url.path, exc_info=exc)
    detail = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return PlainTextResponse(detail, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain error mapping on ``app``."""

    app.add_exception_handler(RecordNotFound, _not_found)
    app.add_exception_handler(ValidationFailed, _validation_failed)
    app.add_exception_handler(RequestValidationError, _request_invalid)
    app.add_exception_handler(UniquenessConflict, _uniqueness_conflict)
    app.add_exception_handler(Unauthorized, _unauthorized)
    app.add_exception_handler(AlreadyAuthenticated, _already_authenticated)
    app.add_exception_handler(Exception, _unhandled)


__all__ = ["register_exception_handlers"]
