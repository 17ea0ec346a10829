"""Generic record store over a SQLModel session.

Every read and write the service layer performs goes through
:class:`RecordStore`, which translates SQLAlchemy failures into the
domain error taxonomy and commits each write on its own.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Type, TypeVar

from sqlalchemy import update as sa_update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from ..core.errors import Conflict, FetchError, PersistenceError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)

_NATIVE_UPSERT = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class RecordStore:
    """select / insert / update / upsert / compare-and-swap over named tables."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # Reads -----------------------------------------------------------------
    def select(
        self,
        model: Type[ModelT],
        where: Optional[Mapping[str, Any]] = None,
        order_by: Sequence[Any] = (),
    ) -> List[ModelT]:
        statement = _filtered(select(model), model, where)
        if order_by:
            statement = statement.order_by(*order_by)
        return list(self._read(lambda: self.session.exec(statement).all()))

    def first(self, model: Type[ModelT], where: Mapping[str, Any]) -> Optional[ModelT]:
        statement = _filtered(select(model), model, where)
        return self._read(lambda: self.session.exec(statement).first())

    def get(self, model: Type[ModelT], key: Any) -> Optional[ModelT]:
        return self._read(lambda: self.session.get(model, key))

    def rows(self, statement: Any) -> List[Any]:
        """Run an arbitrary select (joins, projections) and return all rows."""

        return list(self._read(lambda: self.session.exec(statement).all()))

    # Writes ----------------------------------------------------------------
    def insert(self, row: ModelT) -> ModelT:
        self.session.add(row)
        self._commit(f"insert into {row.__tablename__}")
        try:
            self.session.refresh(row)
        except SQLAlchemyError as exc:
            raise FetchError() from exc
        return row

    def update(
        self,
        model: Type[SQLModel],
        where: Mapping[str, Any],
        patch: Mapping[str, Any],
    ) -> int:
        """Apply ``patch`` to every row matching ``where``; return the row count."""

        table = model.__table__
        statement = sa_update(table).values(**dict(patch))
        for column, value in where.items():
            statement = statement.where(table.c[column] == value)
        result = self._write(statement, f"update {model.__tablename__}")
        return result.rowcount or 0

    def compare_and_swap(
        self,
        model: Type[SQLModel],
        where: Mapping[str, Any],
        version_column: str,
        expected: int,
        patch: Mapping[str, Any],
    ) -> bool:
        """Update the row only if its version still equals ``expected``.

        The version is incremented as part of the same statement, so two
        writers holding the same snapshot cannot both succeed.
        """

        version = model.__table__.c[version_column]
        guarded = {**dict(where), version_column: expected}
        values = {**dict(patch), version_column: version + 1}
        return self.update(model, guarded, values) == 1

    def upsert(
        self,
        model: Type[ModelT],
        values: Mapping[str, Any],
        conflict_keys: Sequence[str],
        update_keys: Optional[Sequence[str]] = None,
    ) -> ModelT:
        """Insert ``values`` or update the row sharing ``conflict_keys``.

        Only the keys given in ``values`` (minus the conflict keys) are
        overwritten on conflict unless ``update_keys`` narrows them further.
        """

        if update_keys is None:
            update_keys = [key for key in values if key not in conflict_keys]
        lookup = {key: values[key] for key in conflict_keys}

        insert = _NATIVE_UPSERT.get(self._dialect())
        if insert is None:
            return self._upsert_fallback(model, values, lookup, update_keys)

        row_values = model(**dict(values)).model_dump(exclude_none=True)
        statement = insert(model.__table__).values(**row_values)
        if update_keys:
            statement = statement.on_conflict_do_update(
                index_elements=list(conflict_keys),
                set_={key: statement.excluded[key] for key in update_keys},
            )
        else:
            statement = statement.on_conflict_do_nothing(
                index_elements=list(conflict_keys)
            )
        self._write(statement, f"upsert into {model.__tablename__}")

        row = self.first(model, lookup)
        if row is None:
            raise PersistenceError()
        return row

    # Internals -------------------------------------------------------------
    def _dialect(self) -> str:
        return self.session.get_bind().dialect.name

    def _upsert_fallback(
        self,
        model: Type[ModelT],
        values: Mapping[str, Any],
        lookup: Dict[str, Any],
        update_keys: Sequence[str],
    ) -> ModelT:
        existing = self.first(model, lookup)
        if existing is None:
            return self.insert(model(**dict(values)))
        if update_keys:
            self.update(model, lookup, {key: values[key] for key in update_keys})
        row = self.first(model, lookup)
        if row is None:
            raise PersistenceError()
        return row

    def _read(self, fetch):
        try:
            return fetch()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Record store read failed: %s", exc)
            raise FetchError() from exc

    def _write(self, statement: Any, action: str):
        try:
            result = self.session.connection().execute(statement)
        except IntegrityError as exc:
            self.session.rollback()
            logger.warning("Record store %s rejected: %s", action, exc.orig)
            raise Conflict() from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Record store %s failed: %s", action, exc)
            raise PersistenceError() from exc
        self._commit(action)
        return result

    def _commit(self, action: str) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            logger.warning("Record store %s rejected: %s", action, exc.orig)
            raise Conflict() from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Record store %s failed: %s", action, exc)
            raise PersistenceError() from exc


def _filtered(statement: Any, model: Type[SQLModel], where: Optional[Mapping[str, Any]]):
    for column, value in (where or {}).items():
        statement = statement.where(getattr(model, column) == value)
    return statement


__all__ = ["RecordStore"]
