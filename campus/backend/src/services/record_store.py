"""Typed record collections over a SQLAlchemy session."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import RecordNotFound, UniquenessConflict
from ..models.base import Base

LOGGER = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class RecordStore(Generic[ModelT]):
    """Find, save and delete records of one entity kind.

    The database is the only authority on uniqueness: :meth:`save` does not
    pre-check constrained columns, it attempts the write and converts the
    resulting :class:`~sqlalchemy.exc.IntegrityError` into
    :class:`UniquenessConflict` after rolling the session back, so a rejected
    record is never partially persisted.
    """

    def __init__(self, session: Session, model: type[ModelT], label: str | None = None) -> None:
        self.session = session
        self.model = model
        self.label = label or model.__name__

    def find_all(self) -> list[ModelT]:
        return list(self.session.scalars(select(self.model).order_by(self.model.id)).all())

    def find_one_or_fail(self, key: int) -> ModelT:
        record = self.session.get(self.model, key)
        if record is None:
            raise RecordNotFound(self.label, key)
        return record

    def find_by(self, **filters: Any) -> ModelT | None:
        return self.session.scalars(select(self.model).filter_by(**filters).limit(1)).first()

    def save(self, record: ModelT) -> ModelT:
        """Insert or update ``record`` and commit."""

        self.session.add(record)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            message = str(exc.orig) if exc.orig is not None else str(exc)
            LOGGER.info("record_save_rejected", model=self.label, reason=message)
            raise UniquenessConflict(message) from exc
        self.session.refresh(record)
        LOGGER.debug("record_saved", model=self.label, record_id=record.id)
        return record

    def delete(self, key: int) -> None:
        record = self.find_one_or_fail(key)
        self.session.delete(record)
        self.session.commit()
        LOGGER.info("record_deleted", model=self.label, record_id=key)


__all__ = ["RecordStore"]
