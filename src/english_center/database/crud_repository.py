from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from .connection import DatabaseClient
from .mysql_base import db_cursor, fetchall, fetchone, like_pattern, storage_errors


class MySQLTableRepository:
    """Parameterized CRUD over one table, reading through a joined view.

    Subclasses describe their table with class attributes. Column names only
    ever come from these attributes; request data is filtered against
    ``columns`` before it reaches SQL.
    """

    table: str = ""
    id_column: str = ""
    columns: Sequence[str] = ()
    # SELECT ... FROM <table> <alias> [JOIN ...] without WHERE/ORDER BY
    select_sql: str = ""
    alias: str = ""
    order_by: str = ""
    search_columns: Sequence[str] = ()
    search_order_by: str = ""

    entity: str = "record"
    invalid_reference_message: Optional[str] = None
    duplicate_message: Optional[str] = None
    referenced_message: Optional[str] = None

    def __init__(self, db: DatabaseClient):
        self._db = db

    def _errors(self, action: str):
        return storage_errors(
            action,
            invalid_reference=self.invalid_reference_message,
            duplicate=self.duplicate_message,
            referenced=self.referenced_message,
        )

    def _view(self, where: str = "", order_by: str = "") -> str:
        sql = self.select_sql
        if where:
            sql += f" WHERE {where}"
        if order_by:
            sql += f" ORDER BY {order_by}"
        return sql

    def _id_ref(self) -> str:
        return f"{self.alias}.{self.id_column}" if self.alias else self.id_column

    def _fetch_by_id(self, cur, record_id: int) -> Optional[Dict[str, Any]]:
        cur.execute(self._view(f"{self._id_ref()}=%s"), (int(record_id),))
        return fetchone(cur)

    def _writable(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        return {c: values[c] for c in self.columns if c in values}

    def list_all(self) -> List[Dict[str, Any]]:
        with self._errors(f"fetching {self.entity}s"), db_cursor(self._db) as (_, cur):
            cur.execute(self._view(order_by=self.order_by))
            return fetchall(cur)

    def list_where(self, column: str, value: Any, *, order_by: str = "") -> List[Dict[str, Any]]:
        with self._errors(f"fetching {self.entity}s"), db_cursor(self._db) as (_, cur):
            cur.execute(self._view(f"{column}=%s", order_by or self.order_by), (value,))
            return fetchall(cur)

    def get_by_id(self, record_id: int) -> Optional[Dict[str, Any]]:
        with self._errors(f"fetching {self.entity}"), db_cursor(self._db) as (_, cur):
            return self._fetch_by_id(cur, record_id)

    def search(self, term: str) -> List[Dict[str, Any]]:
        where = " OR ".join(f"{c} LIKE %s" for c in self.search_columns)
        params = tuple(like_pattern(term) for _ in self.search_columns)
        with self._errors(f"searching {self.entity}s"), db_cursor(self._db) as (_, cur):
            cur.execute(self._view(where, self.search_order_by or self.order_by), params)
            return fetchall(cur)

    def create(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        data = self._writable(values)
        cols = ", ".join(data)
        marks = ",".join(["%s"] * len(data))
        with self._errors(f"creating {self.entity}"), db_cursor(self._db) as (_, cur):
            cur.execute(f"INSERT INTO {self.table}({cols}) VALUES({marks})", tuple(data.values()))
            return self._fetch_by_id(cur, int(cur.lastrowid))

    def update(self, record_id: int, values: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        data = self._writable(values)
        with self._errors(f"updating {self.entity}"), db_cursor(self._db) as (_, cur):
            if data:
                assignments = ", ".join(f"{c}=%s" for c in data)
                cur.execute(
                    f"UPDATE {self.table} SET {assignments} WHERE {self.id_column}=%s",
                    (*data.values(), int(record_id)),
                )
            return self._fetch_by_id(cur, record_id)

    def _before_delete(self, cur, record_id: int) -> None:
        """Hook for dependency checks that must run in the delete transaction."""

    def delete(self, record_id: int) -> Optional[Dict[str, Any]]:
        with self._errors(f"deleting {self.entity}"), db_cursor(self._db) as (_, cur):
            row = self._fetch_by_id(cur, record_id)
            if not row:
                return None
            self._before_delete(cur, int(record_id))
            cur.execute(f"DELETE FROM {self.table} WHERE {self.id_column}=%s", (int(record_id),))
            return row

    def count_where(self, cur, table: str, column: str, value: Any) -> int:
        cur.execute(f"SELECT COUNT(*) AS n FROM {table} WHERE {column}=%s", (value,))
        row = fetchone(cur) or {}
        return int(row.get("n") or 0)
