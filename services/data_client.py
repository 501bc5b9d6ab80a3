"""Generic table/view client over the application database.

Screens never touch models directly; they go through :class:`DataClient`
with table names, match filters and plain dict records, and get plain dict
rows back. Any database failure is rolled back and re-raised as
:class:`RemoteOperationError`.
"""
import logging

from flask import current_app
from sqlalchemy import case, delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from services.errors import RemoteOperationError

logger = logging.getLogger(__name__)

LOOKUPS = {
    'eq': lambda col, value: col.is_(None) if value is None else col == value,
    'ne': lambda col, value: col.is_not(None) if value is None else col != value,
    'gt': lambda col, value: col > value,
    'gte': lambda col, value: col >= value,
    'lt': lambda col, value: col < value,
    'lte': lambda col, value: col <= value,
    'ilike': lambda col, value: func.lower(col).like(f'%{str(value).lower()}%'),
    'in': lambda col, value: col.in_(list(value)),
}


class DataClient:
    def __init__(self, db, tables=None, views=None):
        self.db = db
        self._tables = dict(tables or {})
        self._views = dict(views or {})

    @classmethod
    def from_models(cls, db, views, exclude=('users',)):
        # credentials stay behind the auth client
        tables = {name: table for name, table in db.metadata.tables.items() if name not in exclude}
        return cls(db, tables=tables, views=views)

    # -- sources ---------------------------------------------------------

    def _source(self, name):
        if name in self._tables:
            return self._tables[name]
        if name in self._views:
            return self._views[name]
        raise RemoteOperationError(f'relation "{name}" does not exist', code='undefined_table')

    def _writable(self, name):
        if name in self._views:
            raise RemoteOperationError(f'cannot modify view "{name}"', code='read_only')
        return self._source(name)

    @staticmethod
    def _column(source, name):
        try:
            return source.c[name]
        except KeyError:
            raise RemoteOperationError(
                f'column "{name}" does not exist on "{source.name}"', code='undefined_column')

    def _where(self, source, filters):
        clauses = []
        for key, value in (filters or {}).items():
            column_name, _, lookup = key.partition('__')
            lookup = lookup or 'eq'
            if lookup not in LOOKUPS:
                raise RemoteOperationError(f'unsupported filter "{key}"', code='bad_filter')
            clauses.append(LOOKUPS[lookup](self._column(source, column_name), value))
        return clauses

    def _check_record(self, source, record):
        for key in record:
            self._column(source, key)

    # -- execution -------------------------------------------------------

    def _execute(self, statement, commit=False):
        session = self.db.session
        try:
            result = session.execute(statement)
            if commit:
                session.commit()
            return result
        except SQLAlchemyError as e:
            session.rollback()
            message = str(getattr(e, 'orig', None) or e)
            logger.warning('data store call failed: %s', message)
            raise RemoteOperationError(message, code=type(e).__name__) from e

    # -- queries ---------------------------------------------------------

    def select(self, table, columns=None, filters=None, order_by=None, descending=False, limit=None):
        source = self._source(table)
        selected = [self._column(source, c) for c in columns] if columns else [source]
        statement = select(*selected).where(*self._where(source, filters))
        if order_by:
            order_column = self._column(source, order_by)
            statement = statement.order_by(order_column.desc() if descending else order_column)
        if limit is not None:
            statement = statement.limit(limit)
        rows = self._execute(statement).mappings().all()
        return [dict(row) for row in rows]

    def select_one(self, table, filters, columns=None):
        rows = self.select(table, columns=columns, filters=filters, limit=2)
        if len(rows) > 1:
            raise RemoteOperationError(f'multiple rows returned from "{table}"', code='multiple_rows')
        return rows[0] if rows else None

    def count(self, table, filters=None):
        source = self._source(table)
        statement = select(func.count()).select_from(source).where(*self._where(source, filters))
        return self._execute(statement).scalar_one()

    # -- mutations -------------------------------------------------------

    def insert(self, table, record):
        source = self._writable(table)
        self._check_record(source, record)
        result = self._execute(insert(source).values(**record), commit=True)
        key = result.inserted_primary_key
        primary = list(source.primary_key.columns)
        if not key or not primary:
            return dict(record)
        match = {column.name: value for column, value in zip(primary, key)}
        return self.select_one(table, match) or dict(record)

    def update(self, table, values, match):
        source = self._writable(table)
        self._check_record(source, values)
        statement = update(source).where(*self._where(source, match)).values(**values)
        return self._execute(statement, commit=True).rowcount

    def delete(self, table, match):
        source = self._writable(table)
        statement = delete(source).where(*self._where(source, match))
        return self._execute(statement, commit=True).rowcount

    def adjust(self, table, column, delta, match, floor=0):
        """Add ``delta`` to ``column`` in a single statement.

        The new value never drops below ``floor``; concurrent adjustments
        compose instead of overwriting each other.
        """
        source = self._writable(table)
        target = self._column(source, column)
        new_value = target + delta
        if floor is not None:
            new_value = case((new_value < floor, floor), else_=new_value)
        statement = update(source).where(*self._where(source, match)).values({target.name: new_value})
        return self._execute(statement, commit=True).rowcount


def get_data_client():
    return current_app.extensions['data_client']
