from __future__ import annotations

from typing import Any, Generic, Iterable, TypeVar

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from frontdesk.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class StoreError(Exception):
    """The store rejected a read or write; the message is the store's own."""


class RowNotFoundError(StoreError):
    pass


def _store_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class TableStore(Generic[ModelT]):
    """Query / insert / update access to one table.

    Every write commits on its own, so a row that was written stays written even if a
    later step of the same workflow fails.
    """

    def __init__(self, session: Session, model: type[ModelT]) -> None:
        self.session = session
        self.model = model
        self.table = model.__tablename__

    def query(self, *criteria: Any, order_by: Iterable[Any] = (), limit: int | None = None) -> list[ModelT]:
        stmt = select(self.model)
        if criteria:
            stmt = stmt.where(*criteria)
        stmt = stmt.order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            return list(self.session.scalars(stmt))
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreError(_store_message(exc)) from exc

    def all(self, *order_by: Any) -> list[ModelT]:
        return self.query(order_by=order_by)

    def get(self, row_id: int) -> ModelT | None:
        try:
            return self.session.get(self.model, row_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreError(_store_message(exc)) from exc

    def insert(self, **values: Any) -> ModelT:
        row = self.model(**values)
        self.session.add(row)
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning("Insert into {table} rejected: {error}", table=self.table, error=_store_message(exc))
            raise StoreError(_store_message(exc)) from exc
        self.session.refresh(row)
        return row

    def update(self, row_id: int, **values: Any) -> ModelT:
        row = self.get(row_id)
        if row is None:
            raise RowNotFoundError(f"no {self.table} row with id {row_id}")
        for key, value in values.items():
            setattr(row, key, value)
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning(
                "Update of {table} id={row_id} rejected: {error}",
                table=self.table,
                row_id=row_id,
                error=_store_message(exc),
            )
            raise StoreError(_store_message(exc)) from exc
        self.session.refresh(row)
        return row
