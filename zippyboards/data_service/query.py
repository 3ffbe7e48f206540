"""Table query builder of the data service."""
from __future__ import annotations

import enum
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Union

from sqlalchemy import Date, DateTime, Enum as SQLEnum
from sqlalchemy.orm import Query, Session

from zippyboards.data_service.policies import TABLE_POLICIES
from zippyboards.errors import (
    INSUFFICIENT_PRIVILEGE,
    NO_SINGLE_ROW,
    UNDEFINED_COLUMN,
    UNDEFINED_TABLE,
    DataServiceError,
)
from zippyboards.models import Project, ProjectMember, Task, User, WaitlistEntry
from zippyboards.utils.timestamps import ensure_aware

if TYPE_CHECKING:
    from zippyboards.data_service.client import DataServiceClient

Row = Dict[str, Any]

TABLES = {
    model.__tablename__: model
    for model in (Project, ProjectMember, Task, User, WaitlistEntry)
}

# Never returned to callers, elevated or not
HIDDEN_COLUMNS = {"password_hash"}

INVALID_TEXT_REPRESENTATION = "22P02"
INVALID_DATETIME_FORMAT = "22007"


def serialize_row(obj: Any) -> Row:
    row: Row = {}
    for column in obj.__table__.columns:
        if column.key in HIDDEN_COLUMNS:
            continue
        value = getattr(obj, column.key)
        if isinstance(value, enum.Enum):
            value = value.value
        elif isinstance(value, datetime):
            value = ensure_aware(value)
        row[column.key] = value
    return row


def coerce_value(table: str, column, value: Any) -> Any:
    """Convert wire values (strings) into what ``column`` stores."""
    if value is None:
        return None
    column_type = column.type
    if isinstance(column_type, SQLEnum) and column_type.enum_class is not None:
        if isinstance(value, column_type.enum_class):
            return value
        try:
            return column_type.enum_class(value)
        except ValueError:
            raise DataServiceError(
                f'invalid input value for enum {table}.{column.key}: "{value}"',
                code=INVALID_TEXT_REPRESENTATION,
            ) from None
    if isinstance(column_type, DateTime) and isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            raise DataServiceError(f'invalid input syntax for timestamp: "{value}"', code=INVALID_DATETIME_FORMAT) from None
    if isinstance(column_type, Date) and isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            raise DataServiceError(f'invalid input syntax for date: "{value}"', code=INVALID_DATETIME_FORMAT) from None
    return value


class TableQuery:
    """Filtered view of one table, bound to the client's identity.

    Filters accumulate through ``eq``/``in_``/``order``/``limit``; the terminal
    calls (``select``, ``single``, ``maybe_single``, ``insert``, ``update``,
    ``delete``) run one request each.
    """

    def __init__(self, client: "DataServiceClient", name: str):
        model = TABLES.get(name)
        if model is None:
            raise DataServiceError(f'relation "public.{name}" does not exist', code=UNDEFINED_TABLE)
        self._client = client
        self._name = name
        self._model = model
        self._policy = TABLE_POLICIES[name]
        self._filters: List[Any] = []
        self._order: List[Any] = []
        self._limit: Optional[int] = None

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    def eq(self, column: str, value: Any) -> "TableQuery":
        target = self._column(column)
        if value is None:
            self._filters.append(target.is_(None))
        else:
            self._filters.append(target == coerce_value(self._name, target, value))
        return self

    def in_(self, column: str, values: Iterable[Any]) -> "TableQuery":
        target = self._column(column)
        self._filters.append(target.in_([coerce_value(self._name, target, value) for value in values]))
        return self

    def order(self, column: str, *, desc: bool = False) -> "TableQuery":
        target = self._column(column)
        self._order.append(target.desc() if desc else target.asc())
        return self

    def limit(self, count: int) -> "TableQuery":
        self._limit = count
        return self

    # ------------------------------------------------------------------
    # Terminal operations
    # ------------------------------------------------------------------

    def select(self, *columns: str) -> List[Row]:
        for column in columns:
            self._column(column)
        user_id = self._acting_user_id()
        with self._client.connect() as db:
            objects = self._query(db, self._policy.visible, user_id).all()
            return [self._project(serialize_row(obj), columns) for obj in objects]

    def single(self, *columns: str) -> Row:
        rows = self.select(*columns)
        if len(rows) != 1:
            raise DataServiceError(
                "JSON object requested, multiple (or no) rows returned",
                code=NO_SINGLE_ROW,
                details=f"The result contains {len(rows)} rows",
            )
        return rows[0]

    def maybe_single(self, *columns: str) -> Optional[Row]:
        rows = self.select(*columns)
        if len(rows) > 1:
            raise DataServiceError(
                "JSON object requested, multiple rows returned",
                code=NO_SINGLE_ROW,
                details=f"The result contains {len(rows)} rows",
            )
        return rows[0] if rows else None

    def insert(self, values: Union[Row, List[Row]]) -> List[Row]:
        payload = values if isinstance(values, list) else [values]
        user_id = self._acting_user_id()
        with self._client.connect() as db:
            objects = []
            for raw in payload:
                row = self._coerce_row(raw)
                if not self._client.elevated and not self._policy.insert_check(db, user_id, row):
                    raise self._policy_violation()
                objects.append(self._model(**row))
            db.add_all(objects)
            db.commit()
            return [serialize_row(obj) for obj in objects]

    def update(self, values: Row) -> List[Row]:
        changes = self._coerce_row(values)
        user_id = self._acting_user_id()
        with self._client.connect() as db:
            objects = self._query(db, self._policy.updatable, user_id).all()
            for obj in objects:
                for key, value in changes.items():
                    setattr(obj, key, value)
                if not self._client.elevated and not self._policy.update_check(db, user_id, self._pending_row(obj)):
                    raise self._policy_violation()
            db.commit()
            return [serialize_row(obj) for obj in objects]

    def delete(self) -> List[Row]:
        user_id = self._acting_user_id()
        with self._client.connect() as db:
            objects = self._query(db, self._policy.deletable, user_id).all()
            rows = [serialize_row(obj) for obj in objects]
            for obj in objects:
                db.delete(obj)
            db.commit()
            return rows

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _acting_user_id(self) -> Optional[str]:
        return None if self._client.elevated else self._client.current_user_id()

    def _query(self, db: Session, rule, user_id: Optional[str]) -> Query:
        query = db.query(self._model)
        if not self._client.elevated:
            query = query.filter(rule(user_id))
        for condition in self._filters:
            query = query.filter(condition)
        if self._order:
            query = query.order_by(*self._order)
        if self._limit is not None:
            query = query.limit(self._limit)
        return query

    def _column(self, name: str):
        column = self._model.__table__.columns.get(name)
        if column is None or name in HIDDEN_COLUMNS:
            raise DataServiceError(f'column {self._name}.{name} does not exist', code=UNDEFINED_COLUMN)
        return getattr(self._model, name)

    def _coerce_row(self, raw: Row) -> Row:
        row = {}
        for key, value in raw.items():
            column = self._model.__table__.columns.get(key)
            if column is None or key in HIDDEN_COLUMNS:
                raise DataServiceError(
                    f"Could not find the '{key}' column of '{self._name}'",
                    code=UNDEFINED_COLUMN,
                )
            row[key] = coerce_value(self._name, column, value)
        return row

    def _pending_row(self, obj: Any) -> Row:
        return {column.key: getattr(obj, column.key) for column in obj.__table__.columns}

    def _policy_violation(self) -> DataServiceError:
        return DataServiceError(
            f'new row violates row-level security policy for table "{self._name}"',
            code=INSUFFICIENT_PRIVILEGE,
        )

    @staticmethod
    def _project(row: Row, columns) -> Row:
        if not columns:
            return row
        return {column: row[column] for column in columns}
