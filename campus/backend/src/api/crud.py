"""Generic CRUD controller shared by every record kind.

Each entity module hands a
:class:`~campus.backend.src.services.resources.ResourceDescriptor` to a
:class:`CrudController` and receives the five operations (list, get one,
create, update, delete). Error mapping is uniform across kinds, with one
asymmetry that clients already depend on:

* a uniqueness conflict on **create** is answered with a ``200`` soft-failure
  envelope (``status: "fail"``) carrying the store message;
* the same conflict on **update** is a ``409 Conflict``.
"""

from __future__ import annotations

from typing import Any, Mapping

import structlog
from fastapi import APIRouter, Body, Depends, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..core.exceptions import UniquenessConflict
from ..db import get_session_dependency
from ..schemas.envelope import failure, success
from ..services.record_store import RecordStore
from ..services.resources import ResourceDescriptor
from ..services.validation import validate_payload

LOGGER = structlog.get_logger(__name__)


class CrudController:
    """List/get/create/update/delete over one :class:`ResourceDescriptor`."""

    def __init__(self, descriptor: ResourceDescriptor) -> None:
        self.descriptor = descriptor

    def store(self, session: Session) -> RecordStore:
        return RecordStore(session, self.descriptor.model, self.descriptor.label)

    def list(self, session: Session) -> dict[str, Any]:
        records = self.store(session).find_all()
        return success([self.descriptor.serialize(record) for record in records], "Data Found")

    def get_one(self, session: Session, key: int) -> dict[str, Any]:
        record = self.store(session).find_one_or_fail(key)
        return success(self.descriptor.serialize(record), "Data Found")

    def create(self, session: Session, payload: Mapping[str, Any]) -> JSONResponse:
        record = self.descriptor.build(payload)
        try:
            record = self.store(session).save(record)
        except UniquenessConflict as exc:
            return JSONResponse(
                status_code=status.HTTP_200_OK,
                content=failure(
                    exc.message,
                    {"type": "UniquenessConflict", "detail": exc.message},
                ),
            )

        LOGGER.info("record_created", model=self.descriptor.label, record_id=record.id)
        return JSONResponse(
            status_code=status.HTTP_201_CREATED,
            content=success({"id": record.id}, f"{self.descriptor.label} created"),
        )

    def update(self, session: Session, key: int, payload: Mapping[str, Any]) -> Response:
        store = self.store(session)
        record = store.find_one_or_fail(key)

        provided = self.descriptor.pick(payload)
        current = {name: getattr(record, name) for name in self.descriptor.writable_fields}
        candidate = validate_payload(self.descriptor.write_schema, {**current, **provided})
        values = self.descriptor.prepare(candidate.model_dump(), provided)

        for name, value in values.items():
            setattr(record, name, value)
        # UniquenessConflict propagates and is mapped to 409.
        store.save(record)

        LOGGER.info("record_updated", model=self.descriptor.label, record_id=key)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    def delete(self, session: Session, key: int) -> Response:
        store = self.store(session)
        store.find_one_or_fail(key)
        store.delete(key)
        return Response(status_code=status.HTTP_204_NO_CONTENT)


def build_crud_router(controller: CrudController, *, prefix: str, tags: list[str]) -> APIRouter:
    """Bind the controller's operations to the collection and item paths."""

    router = APIRouter(prefix=prefix, tags=tags)
    label = controller.descriptor.label

    @router.get("", summary=f"List {label} records")
    def list_records(session: Session = Depends(get_session_dependency)) -> dict[str, Any]:
        return controller.list(session)

    @router.get("/{record_id}", summary=f"Get one {label}")
    def get_record(
        record_id: int, session: Session = Depends(get_session_dependency)
    ) -> dict[str, Any]:
        return controller.get_one(session, record_id)

    @router.post("", status_code=status.HTTP_201_CREATED, summary=f"Create a {label}")
    def create_record(
        payload: dict[str, Any] = Body(...),
        session: Session = Depends(get_session_dependency),
    ) -> Response:
        return controller.create(session, payload)

    @router.api_route(
        "/{record_id}",
        methods=["PUT", "PATCH"],
        status_code=status.HTTP_204_NO_CONTENT,
        summary=f"Update a {label}",
    )
    def update_record(
        record_id: int,
        payload: dict[str, Any] = Body(...),
        session: Session = Depends(get_session_dependency),
    ) -> Response:
        return controller.update(session, record_id, payload)

    @router.delete(
        "/{record_id}", status_code=status.HTTP_204_NO_CONTENT, summary=f"Delete a {label}"
    )
    def delete_record(
        record_id: int, session: Session = Depends(get_session_dependency)
    ) -> Response:
        return controller.delete(session, record_id)

    return router


__all__ = ["CrudController", "build_crud_router"]
