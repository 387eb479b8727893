"""
Table-level access helpers used by the services.

``EntityStore`` wraps one SQLite table and exposes the handful of
operations the services need: insert, lookup by id or by field, listing
with equality filters, partial update and removal.  Every method takes
the cursor to run on, so a service can group several calls into one
transaction by sharing a cursor from ``core.db.get_cursor``.

Column names are fixed per store and checked before being interpolated
into SQL; values are always passed as parameters.
"""

import json
import sqlite3
from typing import Any, Dict, Iterable, List, Optional, Union

from .errors import BadId, BadIdReason

# Largest value an SQLite INTEGER column can hold.
SQLITE_MAX_INTEGER = 2**63 - 1


def parse_id(raw_id: Union[str, int]) -> int:
    """Convert a client supplied identifier into a row id.

    Row ids are positive integers that fit in an SQLite INTEGER;
    anything else is rejected as ``BadId`` with reason ``MALFORMED``.
    """
    if isinstance(raw_id, bool):
        raise BadId(raw_id, BadIdReason.MALFORMED)
    if isinstance(raw_id, int):
        value = raw_id
    elif isinstance(raw_id, str) and raw_id.isdigit() and raw_id.isascii():
        value = int(raw_id)
    else:
        raise BadId(raw_id, BadIdReason.MALFORMED)
    if value <= 0 or value > SQLITE_MAX_INTEGER:
        raise BadId(raw_id, BadIdReason.MALFORMED)
    return value


class EntityStore:
    """Row access for a single table."""

    def __init__(
        self,
        table: str,
        columns: Iterable[str],
        json_columns: Iterable[str] = (),
        touch_column: Optional[str] = None,
    ) -> None:
        self.table = table
        self.columns = tuple(columns)
        self.json_columns = frozenset(json_columns)
        self.touch_column = touch_column

    def _check(self, fields: Iterable[str]) -> None:
        unknown = set(fields) - set(self.columns) - {"id"}
        if unknown:
            raise KeyError(f"Unknown column(s) for {self.table}: {', '.join(sorted(unknown))}")

    def _encode(self, field: str, value: Any) -> Any:
        if field in self.json_columns:
            return json.dumps(value)
        return value

    def _decode(self, row: Optional[sqlite3.Row]) -> Optional[Dict[str, Any]]:
        if row is None:
            return None
        entity = dict(row)
        for field in self.json_columns:
            if entity.get(field) is not None:
                entity[field] = json.loads(entity[field])
        return entity

    def insert(self, cursor: sqlite3.Cursor, entity: Dict[str, Any]) -> int:
        """Insert a row and return its new id."""
        self._check(entity)
        fields = list(entity)
        placeholders = ", ".join("?" for _ in fields)
        cursor.execute(
            f"INSERT INTO {self.table} ({', '.join(fields)}) VALUES ({placeholders})",
            tuple(self._encode(f, entity[f]) for f in fields),
        )
        return cursor.lastrowid

    def find_by_id(self, cursor: sqlite3.Cursor, entity_id: int) -> Optional[Dict[str, Any]]:
        return self.find_by_field(cursor, "id", entity_id)

    def find_by_field(self, cursor: sqlite3.Cursor, field: str, value: Any) -> Optional[Dict[str, Any]]:
        self._check([field])
        row = cursor.execute(
            f"SELECT id, {', '.join(self.columns)} FROM {self.table} WHERE {field} = ?",
            (value,),
        ).fetchone()
        return self._decode(row)

    def find_all(self, cursor: sqlite3.Cursor, **filters: Any) -> List[Dict[str, Any]]:
        """Return all rows matching the equality ``filters``, ordered by id."""
        self._check(filters)
        query = f"SELECT id, {', '.join(self.columns)} FROM {self.table}"
        params: list = []
        if filters:
            query += " WHERE " + " AND ".join(f"{field} = ?" for field in filters)
            params.extend(self._encode(f, v) for f, v in filters.items())
        query += " ORDER BY id"
        return [self._decode(row) for row in cursor.execute(query, tuple(params)).fetchall()]

    def find_many(self, cursor: sqlite3.Cursor, ids: Iterable[int]) -> Dict[int, Dict[str, Any]]:
        """Fetch the rows for ``ids`` keyed by id; unknown ids are skipped."""
        ids = list(ids)
        if not ids:
            return {}
        placeholders = ", ".join("?" for _ in ids)
        rows = cursor.execute(
            f"SELECT id, {', '.join(self.columns)} FROM {self.table} WHERE id IN ({placeholders})",
            tuple(ids),
        ).fetchall()
        return {row["id"]: self._decode(row) for row in rows}

    def update(self, cursor: sqlite3.Cursor, entity_id: int, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Apply ``patch`` to the row and return it, or ``None`` if absent."""
        self._check(patch)
        if patch:
            assignments = ", ".join(f"{field} = ?" for field in patch)
            if self.touch_column:
                assignments += f", {self.touch_column} = CURRENT_TIMESTAMP"
            cursor.execute(
                f"UPDATE {self.table} SET {assignments} WHERE id = ?",
                tuple(self._encode(f, v) for f, v in patch.items()) + (entity_id,),
            )
            if cursor.rowcount == 0:
                return None
        return self.find_by_id(cursor, entity_id)

    def remove(self, cursor: sqlite3.Cursor, entity_id: int) -> bool:
        cursor.execute(f"DELETE FROM {self.table} WHERE id = ?", (entity_id,))
        return cursor.rowcount > 0


blogs = EntityStore("blogs", ("title", "author", "url", "likes", "owner_id"), touch_column="updated_at")
users = EntityStore("users", ("username", "name", "password_hash", "owned_blogs"), json_columns=("owned_blogs",))
