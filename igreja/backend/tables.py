"""
Generic table access: filtered select/insert/update/delete

Every call opens its own session, so each operation is an independent
round trip. Database failures surface as BackendError.
"""

from datetime import datetime
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Union
import structlog

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import SQLModel, select

from igreja.backend.realtime import RowChange
from igreja.core.errors import BackendError, NotFoundError
from igreja.models import TABLES

if TYPE_CHECKING:
    from igreja.backend.service import HostedBackend

logger = structlog.get_logger(__name__)

Values = Dict[str, Any]


@lru_cache(maxsize=None)
def _adapter(model: type, column: str) -> TypeAdapter:
    return TypeAdapter(model.model_fields[column].annotation)


def _snapshot(row: SQLModel) -> Values:
    return row.model_dump()


def _integrity_error(exc: IntegrityError) -> BackendError:
    message = str(exc.orig) if exc.orig is not None else str(exc)
    lowered = message.lower()
    if "unique" in lowered or "duplicate" in lowered:
        code = "23505"
    elif "foreign key" in lowered:
        code = "23503"
    elif "not null" in lowered:
        code = "23502"
    else:
        code = "23000"
    return BackendError(message, code=code)


# Columns that must point at a row of the same tenant (the row-level
# policies on appointments)
TENANT_REFERENCES = {
    "appointments": {"leader_id": "leaders", "member_id": "members"},
}


def _check_tenant_references(session, table_name: str, row: SQLModel):
    for column, target in TENANT_REFERENCES.get(table_name, {}).items():
        ref_id = getattr(row, column)
        if ref_id is None:
            continue
        referenced = session.get(TABLES[target], ref_id)
        if referenced is None:
            raise BackendError(
                f'insert or update on table "{table_name}" violates foreign key constraint',
                code="23503",
                details=f'Key ({column})=({ref_id}) is not present in table "{target}".',
            )
        if referenced.tenant_id != row.tenant_id:
            raise BackendError(
                f'new row violates row-level security policy for table "{table_name}"',
                code="42501",
                details=f"{column} references a row of another tenant",
            )


class Query:
    """Filter builder bound to one table and one action"""

    def __init__(self, table: "Table", action: str = "select", values: Optional[Values] = None):
        self._table = table
        self._action = action
        self._values = values
        self._conditions: List[Any] = []
        self._order: List[Any] = []
        self._limit: Optional[int] = None
        self._offset: Optional[int] = None

    @property
    def model(self):
        return self._table.model

    # Filters

    def eq(self, column: str, value: Any) -> "Query":
        self._conditions.append(self._table.column(column) == self._table.coerce(column, value))
        return self

    def neq(self, column: str, value: Any) -> "Query":
        self._conditions.append(self._table.column(column) != self._table.coerce(column, value))
        return self

    def gte(self, column: str, value: Any) -> "Query":
        self._conditions.append(self._table.column(column) >= self._table.coerce(column, value))
        return self

    def lte(self, column: str, value: Any) -> "Query":
        self._conditions.append(self._table.column(column) <= self._table.coerce(column, value))
        return self

    def in_(self, column: str, values: Sequence[Any]) -> "Query":
        coerced = [self._table.coerce(column, v) for v in values]
        self._conditions.append(self._table.column(column).in_(coerced))
        return self

    def ilike_any(self, columns: Sequence[str], term: str) -> "Query":
        """Case-insensitive substring match on any of the columns"""
        pattern = f"%{term}%"
        self._conditions.append(or_(*[self._table.column(c).ilike(pattern) for c in columns]))
        return self

    def order(self, column: str, desc: bool = False) -> "Query":
        col = self._table.column(column)
        self._order.append(col.desc() if desc else col.asc())
        return self

    def limit(self, count: int) -> "Query":
        self._limit = count
        return self

    def range(self, start: int, end: int) -> "Query":
        """Inclusive row range, like PostgREST"""
        self._offset = start
        self._limit = end - start + 1
        return self

    # Terminals

    async def execute(self) -> List[SQLModel]:
        if self._action == "select":
            return self._select()
        if not self._conditions:
            raise BackendError(f"{self._action.upper()} requires a WHERE clause", code="21000")
        if self._action == "update":
            rows, changes = self._update()
        elif self._action == "delete":
            rows, changes = self._delete()
        else:
            raise BackendError(f"Unsupported action {self._action}")

        for change in changes:
            await self._table.backend.realtime.publish(change)
        return rows

    async def single(self) -> SQLModel:
        rows = await self.execute()
        if len(rows) != 1:
            raise NotFoundError(
                "JSON object requested, multiple (or no) rows returned",
                details=f"The result contains {len(rows)} rows",
            )
        return rows[0]

    async def maybe_single(self) -> Optional[SQLModel]:
        rows = await self.execute()
        if len(rows) > 1:
            raise BackendError(
                "JSON object requested, multiple rows returned",
                code="PGRST116",
                details=f"The result contains {len(rows)} rows",
            )
        return rows[0] if rows else None

    async def count(self) -> int:
        statement = select(func.count()).select_from(self.model).where(*self._conditions)
        try:
            with self._table.backend.session() as session:
                return session.exec(statement).one()
        except SQLAlchemyError as e:
            raise BackendError(str(e), code="XX000") from e

    # Internals

    def _statement(self):
        statement = select(self.model).where(*self._conditions)
        if self._order:
            statement = statement.order_by(*self._order)
        if self._offset:
            statement = statement.offset(self._offset)
        if self._limit is not None:
            statement = statement.limit(self._limit)
        return statement

    def _select(self) -> List[SQLModel]:
        try:
            with self._table.backend.session() as session:
                return list(session.exec(self._statement()).all())
        except SQLAlchemyError as e:
            logger.error("Select failed", table=self._table.name, error=str(e))
            raise BackendError(str(e), code="XX000") from e

    def _update(self):
        values = {k: self._table.coerce(k, v) for k, v in (self._values or {}).items()}
        changes = []
        try:
            with self._table.backend.session() as session:
                rows = list(session.exec(select(self.model).where(*self._conditions)).all())
                for row in rows:
                    old = _snapshot(row)
                    for key, value in values.items():
                        setattr(row, key, value)
                    if "updated_at" in self.model.model_fields and "updated_at" not in values:
                        row.updated_at = datetime.utcnow()
                    _check_tenant_references(session, self._table.name, row)
                    session.add(row)
                    changes.append((row, old))
                session.commit()
                for row, _ in changes:
                    session.refresh(row)
        except IntegrityError as e:
            raise _integrity_error(e) from e
        except SQLAlchemyError as e:
            logger.error("Update failed", table=self._table.name, error=str(e))
            raise BackendError(str(e), code="XX000") from e

        return rows, [RowChange(self._table.name, "UPDATE", _snapshot(row), old) for row, old in changes]

    def _delete(self):
        try:
            with self._table.backend.session() as session:
                rows = list(session.exec(select(self.model).where(*self._conditions)).all())
                olds = [_snapshot(row) for row in rows]
                for row in rows:
                    session.delete(row)
                session.commit()
        except IntegrityError as e:
            raise _integrity_error(e) from e
        except SQLAlchemyError as e:
            logger.error("Delete failed", table=self._table.name, error=str(e))
            raise BackendError(str(e), code="XX000") from e

        return rows, [RowChange(self._table.name, "DELETE", None, old) for old in olds]


class Table:
    """One backend table"""

    def __init__(self, backend: "HostedBackend", name: str, model: type):
        self.backend = backend
        self.name = name
        self.model = model

    def column(self, name: str):
        if name not in self.model.model_fields:
            raise BackendError(f"column {self.name}.{name} does not exist", code="42703")
        return getattr(self.model, name)

    def coerce(self, column: str, value: Any) -> Any:
        """Convert a wire value (str uuid, ISO date, enum value...) to the column's type"""
        self.column(column)
        if value is None:
            return None
        try:
            return _adapter(self.model, column).validate_python(value)
        except ValidationError as e:
            raise BackendError(
                f"invalid input for column {self.name}.{column}",
                code="22P02",
                details=str(e),
            ) from e

    def select(self) -> Query:
        return Query(self, "select")

    def update(self, values: Values) -> Query:
        for key in values:
            self.column(key)
        return Query(self, "update", values)

    def delete(self) -> Query:
        return Query(self, "delete")

    async def insert(self, values: Union[Values, List[Values]]) -> List[SQLModel]:
        """Insert one or many rows atomically and return them"""
        batch = values if isinstance(values, list) else [values]
        rows = []
        for item in batch:
            coerced = {k: self.coerce(k, v) for k, v in item.items()}
            rows.append(self.model(**coerced))

        try:
            with self.backend.session() as session:
                for row in rows:
                    _check_tenant_references(session, self.name, row)
                    session.add(row)
                session.commit()
                for row in rows:
                    session.refresh(row)
        except IntegrityError as e:
            logger.warning("Insert rejected", table=self.name, error=str(e.orig))
            raise _integrity_error(e) from e
        except SQLAlchemyError as e:
            logger.error("Insert failed", table=self.name, error=str(e))
            raise BackendError(str(e), code="XX000") from e

        for row in rows:
            await self.backend.realtime.publish(RowChange(self.name, "INSERT", _snapshot(row), None))
        return rows
