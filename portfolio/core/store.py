"""Record store for profiles, skills and projects.

Every call returns a ``StoreResult`` carrying either ``data`` or an
``error``; nothing is raised to the caller. Callers treat a non-null error
as a hard failure of that call (``raise_for_error`` turns it into a
``RemoteCallError``).

The store owns the access policy: inserts must name the acting identity as
owner, updates and deletes only ever touch rows the acting identity owns,
and reads are public.

Example:
    ```python
    store = RecordStore(get_session_factory())
    result = store.insert('skills', {'user_id': uid, 'name': 'Go', 'proficiency': 4}, identity=uid)
    if result.error:
        print(result.error.message)
    ```
"""
import threading
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from portfolio.core.database import get_session
from portfolio.core.errors import RemoteCallError
from portfolio.core.logging import setup_logging
from portfolio.core.models import Profile, Project, Skill, new_id
from portfolio.core.monitoring import setup_monitoring

logger = setup_logging('store')
monitoring = setup_monitoring('store')

NOT_FOUND = 'not_found'
POLICY_VIOLATION = 'policy_violation'
BAD_REQUEST = 'bad_request'
STORE_ERROR = 'store_error'


class StoreError(BaseModel):
    """Error object returned by the store."""
    message: str
    code: str = STORE_ERROR


class StoreResult(BaseModel):
    """Outcome of a store call: rows (or a single row) or an error."""
    data: Any = None
    error: Optional[StoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> Any:
        """Return ``data`` or raise ``RemoteCallError`` with the store's message."""
        if self.error is not None:
            raise RemoteCallError(self.error.message, code=self.error.code)
        return self.data


class TableSpec(BaseModel):
    model: Any
    owner_column: str
    timestamps: tuple = ('created_at',)


TABLES: Dict[str, TableSpec] = {
    'profiles': TableSpec(model=Profile, owner_column='id', timestamps=('created_at', 'updated_at')),
    'skills': TableSpec(model=Skill, owner_column='user_id'),
    'projects': TableSpec(model=Project, owner_column='user_id'),
}


def _serialize(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, list):
        return list(value)
    return value


def _to_row(obj: Any) -> Dict[str, Any]:
    mapper = sa_inspect(obj).mapper
    return {attr.key: _serialize(getattr(obj, attr.key)) for attr in mapper.column_attrs}


class RecordStore:
    """Table-oriented access to portfolio records."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory
        self._clock_lock = threading.Lock()
        self._last_timestamp: Optional[datetime] = None

    def _now(self) -> datetime:
        # Strictly increasing so created_at ordering is stable within a process
        with self._clock_lock:
            now = datetime.now(timezone.utc)
            if self._last_timestamp is not None and now <= self._last_timestamp:
                now = self._last_timestamp + timedelta(microseconds=1)
            self._last_timestamp = now
            return now

    def _spec(self, table: str) -> TableSpec:
        spec = TABLES.get(table)
        if spec is None:
            raise KeyError(table)
        return spec

    @staticmethod
    def _columns(spec: TableSpec) -> List[str]:
        return [attr.key for attr in sa_inspect(spec.model).column_attrs]

    def _check_columns(self, spec: TableSpec, names) -> Optional[StoreResult]:
        unknown = sorted(set(names) - set(self._columns(spec)))
        if unknown:
            return StoreResult(error=StoreError(
                message=f"Unknown column(s) on {spec.model.__tablename__}: {', '.join(unknown)}",
                code=BAD_REQUEST,
            ))
        return None

    def _query(self, session, spec: TableSpec, filters: Dict[str, Any]):
        query = session.query(spec.model)
        for column, value in filters.items():
            query = query.filter(getattr(spec.model, column) == value)
        return query

    def _fail(self, operation: str, table: str, exc: Exception) -> StoreResult:
        monitoring.track_error(operation, str(exc))
        logger.error(f"Error during {operation} on {table}: {str(exc)}")
        return StoreResult(error=StoreError(message=str(exc), code=STORE_ERROR))

    def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> StoreResult:
        """Return all rows matching ``filters`` (equality on each column)."""
        spec = self._spec(table)
        filters = filters or {}
        invalid = self._check_columns(spec, list(filters) + ([order_by] if order_by else []))
        if invalid:
            return invalid

        try:
            monitoring.increment('select')
            with get_session(self.session_factory) as session:
                query = self._query(session, spec, filters)
                if order_by:
                    column = getattr(spec.model, order_by)
                    query = query.order_by(column.desc() if descending else column.asc())
                rows = [_to_row(obj) for obj in query.all()]
            monitoring.track_success('select')
            return StoreResult(data=rows)

        except SQLAlchemyError as e:
            return self._fail('select', table, e)

    def select_one(self, table: str, filters: Dict[str, Any]) -> StoreResult:
        """Return exactly one row, or a ``not_found`` error."""
        result = self.select(table, filters)
        if result.error:
            return result
        if len(result.data) != 1:
            monitoring.track_failure('select_one')
            message = "Record not found" if not result.data else "Multiple records found"
            return StoreResult(error=StoreError(message=message, code=NOT_FOUND))
        return StoreResult(data=result.data[0])

    def insert(self, table: str, record: Dict[str, Any], identity: Optional[str]) -> StoreResult:
        """Insert one row owned by ``identity`` and return it."""
        spec = self._spec(table)
        invalid = self._check_columns(spec, record)
        if invalid:
            return invalid

        if identity is None or record.get(spec.owner_column) != identity:
            monitoring.track_failure('insert')
            logger.warning(f"Rejected insert into {table}: owner does not match acting identity")
            return StoreResult(error=StoreError(
                message=f'new row violates row-level security policy for table "{table}"',
                code=POLICY_VIOLATION,
            ))

        try:
            monitoring.increment('insert')
            values = dict(record)
            now = self._now()
            for column in spec.timestamps:
                values.setdefault(column, now)
            if 'id' not in values and spec.owner_column != 'id':
                values['id'] = new_id()

            with get_session(self.session_factory) as session:
                obj = spec.model(**values)
                session.add(obj)
                session.flush()
                row = _to_row(obj)
            monitoring.track_success('insert')
            return StoreResult(data=row)

        except SQLAlchemyError as e:
            return self._fail('insert', table, e)

    def update(
        self,
        table: str,
        filters: Dict[str, Any],
        patch: Dict[str, Any],
        identity: Optional[str],
    ) -> StoreResult:
        """Apply ``patch`` to matching rows owned by ``identity``; returns updated rows."""
        spec = self._spec(table)
        invalid = self._check_columns(spec, list(filters) + list(patch))
        if invalid:
            return invalid

        if 'id' in patch or (spec.owner_column in patch and patch[spec.owner_column] != identity):
            monitoring.track_failure('update')
            return StoreResult(error=StoreError(
                message=f"Cannot change the owner or id of {table} rows",
                code=POLICY_VIOLATION,
            ))
        if identity is None or filters.get(spec.owner_column, identity) != identity:
            return StoreResult(data=[])

        try:
            monitoring.increment('update')
            scoped = dict(filters)
            scoped[spec.owner_column] = identity

            with get_session(self.session_factory) as session:
                rows = []
                for obj in self._query(session, spec, scoped).all():
                    for column, value in patch.items():
                        setattr(obj, column, value)
                    if 'updated_at' in spec.timestamps and 'updated_at' not in patch:
                        obj.updated_at = self._now()
                    session.flush()
                    rows.append(_to_row(obj))
            monitoring.track_success('update')
            return StoreResult(data=rows)

        except SQLAlchemyError as e:
            return self._fail('update', table, e)

    def delete(self, table: str, filters: Dict[str, Any], identity: Optional[str]) -> StoreResult:
        """Delete matching rows owned by ``identity``; returns the deleted ids."""
        spec = self._spec(table)
        invalid = self._check_columns(spec, filters)
        if invalid:
            return invalid
        if identity is None or filters.get(spec.owner_column, identity) != identity:
            return StoreResult(data=[])

        try:
            monitoring.increment('delete')
            scoped = dict(filters)
            scoped[spec.owner_column] = identity

            with get_session(self.session_factory) as session:
                deleted = []
                for obj in self._query(session, spec, scoped).all():
                    deleted.append(obj.id)
                    session.delete(obj)
            monitoring.track_success('delete')
            return StoreResult(data=deleted)

        except SQLAlchemyError as e:
            return self._fail('delete', table, e)
