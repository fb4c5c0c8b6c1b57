from __future__ import annotations

import uuid
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from community_events.gateway.base import PersistenceGateway
from community_events.models import Base, ContactInquiry, Event, EventRSVP, UserRole
from community_events.services.error_codes import ErrorCode
from community_events.services.exceptions import PersistenceError

logger = structlog.get_logger(__name__)

TABLES: dict[str, type[Base]] = {
    "events": Event,
    "event_rsvps": EventRSVP,
    "contact_inquiries": ContactInquiry,
    "user_roles": UserRole,
}

_UNIQUE_VIOLATION = "23505"
_INSUFFICIENT_PRIVILEGE = "42501"


def parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def _to_persistence_error(exc: SQLAlchemyError) -> PersistenceError:
    message = str(getattr(exc, "orig", None) or exc)
    if isinstance(exc, DBAPIError):
        state = _sqlstate(exc)
        lowered = message.lower()
        if state == _UNIQUE_VIOLATION or "unique constraint" in lowered or "duplicate key value" in lowered:
            return PersistenceError(message, ErrorCode.DUPLICATE_KEY.value)
        if state == _INSUFFICIENT_PRIVILEGE or "row-level security" in lowered:
            return PersistenceError(message, ErrorCode.ROW_LEVEL_SECURITY.value)
        if isinstance(exc, OperationalError) or exc.connection_invalidated:
            return PersistenceError(f"Network error: {message}", ErrorCode.NETWORK.value)
    return PersistenceError(message, ErrorCode.UNKNOWN.value)


class SqlAlchemyGateway(PersistenceGateway):
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self, table: str, op: str) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except IntegrityError as exc:
            db.rollback()
            logger.info("gateway_constraint_violation", table=table, op=op, error=str(exc.orig))
            raise _to_persistence_error(exc) from exc
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("gateway_error", table=table, op=op, error=str(exc))
            raise _to_persistence_error(exc) from exc
        finally:
            db.close()

    def _model(self, table: str) -> type[Base]:
        try:
            return TABLES[table]
        except KeyError:
            raise PersistenceError(f'relation "{table}" does not exist') from None

    def _column(self, model: type[Base], name: str) -> sa.Column:
        try:
            return model.__table__.columns[name]
        except KeyError:
            raise PersistenceError(
                f'column "{name}" of relation "{model.__tablename__}" does not exist'
            ) from None

    def _coerce(self, column: sa.Column, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(column.type, sa.Uuid) and isinstance(value, str):
            try:
                return uuid.UUID(value)
            except ValueError:
                raise PersistenceError(f'invalid input syntax for type uuid: "{value}"') from None
        if isinstance(column.type, sa.DateTime) and isinstance(value, str):
            try:
                return parse_timestamp(value)
            except ValueError:
                raise PersistenceError(
                    f'invalid input syntax for type timestamp: "{value}"'
                ) from None
        return value

    def _values(self, model: type[Base], data: Mapping[str, Any]) -> dict[str, Any]:
        return {name: self._coerce(self._column(model, name), value) for name, value in data.items()}

    def _conditions(self, model: type[Base], filters: Mapping[str, Any] | None) -> list:
        conditions = []
        for name, value in (filters or {}).items():
            column = self._column(model, name)
            if isinstance(value, (list, tuple, set, frozenset)):
                conditions.append(column.in_([self._coerce(column, v) for v in value]))
            elif value is None:
                conditions.append(column.is_(None))
            else:
                conditions.append(column == self._coerce(column, value))
        return conditions

    @staticmethod
    def _row(obj: Base) -> dict[str, Any]:
        return {column.key: getattr(obj, column.key) for column in obj.__table__.columns}

    def insert(self, table: str, record: Mapping[str, Any]) -> dict[str, Any]:
        model = self._model(table)
        with self._session(table, "insert") as db:
            obj = model(**self._values(model, record))
            db.add(obj)
            db.commit()
            db.refresh(obj)
            return self._row(obj)

    def update(self, table: str, key: Mapping[str, Any], patch: Mapping[str, Any]) -> None:
        model = self._model(table)
        if not key:
            raise PersistenceError("UPDATE requires a WHERE clause")
        with self._session(table, "update") as db:
            db.execute(
                update(model)
                .where(*self._conditions(model, key))
                .values(**self._values(model, patch))
            )
            db.commit()

    def select(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        model = self._model(table)
        stmt = select(model).where(*self._conditions(model, filters))
        if order_by:
            column = self._column(model, order_by)
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        with self._session(table, "select") as db:
            return [self._row(obj) for obj in db.scalars(stmt).all()]

    def delete(self, table: str, key: Mapping[str, Any]) -> None:
        model = self._model(table)
        if not key:
            raise PersistenceError("DELETE requires a WHERE clause")
        with self._session(table, "delete") as db:
            db.execute(delete(model).where(*self._conditions(model, key)))
            db.commit()
