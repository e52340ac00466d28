from __future__ import annotations

import re
import uuid
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import StoreError
from .connection import DatabaseConnection
from .mysql_base import db_cursor, fetchall, fetchone
from .store import COLLECTIONS, EQ, IN, IS_NULL, Filter, Query, RecordStore

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")


def _ident(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise StoreError(f"Invalid column name: {name!r}")
    return f"`{name}`"


def _where(filters: Sequence[Filter]) -> Tuple[str, List[Any]]:
    clauses: List[str] = []
    params: List[Any] = []
    for f in filters:
        col = _ident(f.column)
        if f.op == IS_NULL or (f.op == EQ and f.value is None):
            clauses.append(f"{col} IS NULL")
        elif f.op == EQ:
            clauses.append(f"{col}=%s")
            params.append(f.value)
        elif f.op == IN:
            if not f.value:
                clauses.append("1=0")
            else:
                clauses.append(f"{col} IN ({','.join(['%s'] * len(f.value))})")
                params.extend(f.value)
        else:
            raise StoreError(f"Unsupported filter: {f.op!r}")
    if not clauses:
        return "", params
    return " WHERE " + " AND ".join(clauses), params


def _translate(exc: mysql.connector.Error) -> StoreError:
    if getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY:
        return StoreError(str(exc), StoreError.DUPLICATE)
    return StoreError(str(exc), str(getattr(exc, "errno", "") or "") or None)


class MySQLRecordStore(RecordStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select_sql(self, query: Query) -> Tuple[str, List[Any]]:
        cols = ", ".join(_ident(c) for c in query.columns) if query.columns else "*"
        where, params = _where(query.filters)
        sql = f"SELECT {cols} FROM {_ident(query.collection)}{where}"
        if query.ordering:
            sql += " ORDER BY " + ", ".join(
                f"{_ident(col)} {'DESC' if desc else 'ASC'}" for col, desc in query.ordering
            )
        if query.bounds:
            start, end = query.bounds
            sql += " LIMIT %s OFFSET %s"
            params.extend([end - start + 1, start])
        return sql, params

    def fetch(self, query: Query) -> List[Dict[str, Any]]:
        sql, params = self._select_sql(query)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, tuple(params))
                return fetchall(cur)
        except mysql.connector.Error as e:
            raise _translate(e) from e

    def fetch_one(self, query: Query) -> Optional[Dict[str, Any]]:
        sql, params = self._select_sql(query)
        if not query.bounds:
            sql += " LIMIT 1"
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, tuple(params))
                row = fetchone(cur)
                # Drain unread rows so the cursor closes cleanly.
                cur.fetchall()
                return row
        except mysql.connector.Error as e:
            raise _translate(e) from e

    def count(self, query: Query) -> int:
        where, params = _where(query.filters)
        sql = f"SELECT COUNT(*) AS n FROM {_ident(query.collection)}{where}"
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, tuple(params))
                row = fetchone(cur)
                return int(row["n"]) if row else 0
        except mysql.connector.Error as e:
            raise _translate(e) from e

    def insert(self, collection: str, values: Mapping[str, Any]) -> Dict[str, Any]:
        if collection not in COLLECTIONS:
            raise StoreError(f"Unknown collection: {collection!r}")
        row = dict(values)
        row.setdefault("id", str(uuid.uuid4()))
        cols = ", ".join(_ident(c) for c in row)
        placeholders = ",".join(["%s"] * len(row))
        sql = f"INSERT INTO {_ident(collection)}({cols}) VALUES({placeholders})"
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, tuple(row.values()))
                return row
        except mysql.connector.Error as e:
            raise _translate(e) from e

    def update(self, query: Query, values: Mapping[str, Any]) -> int:
        if not query.filters:
            raise StoreError("Refusing to update without a filter")
        if not values:
            return 0
        assignments = ", ".join(f"{_ident(c)}=%s" for c in values)
        where, params = _where(query.filters)
        sql = f"UPDATE {_ident(query.collection)} SET {assignments}{where}"
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, tuple(values.values()) + tuple(params))
                return int(cur.rowcount)
        except mysql.connector.Error as e:
            raise _translate(e) from e
