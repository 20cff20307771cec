"""SQLite store driver.

Wraps a :class:`sqlite3.Connection` to satisfy the
:class:`~entityspine.protocols.StoreDriver` protocol.

Each statement is committed as soon as it runs (``autocommit=True``), so a
failure never rolls back statements that already completed.

Usage::

    from entityspine.drivers import SqliteDriver

    driver = SqliteDriver(":memory:")
    driver.execute('CREATE TABLE "t" ("id" integer PRIMARY KEY, "name" string)')
    key = driver.execute('INSERT INTO "t" ("name") VALUES (?)', ("a",))
    for columns, values in driver.query('SELECT * FROM "t"'):
        ...
    driver.close()
"""

from __future__ import annotations

import math
import sqlite3
from collections.abc import Sequence
from typing import Any

from entityspine.protocols import ColumnDescriptor, Row
from entityspine.statements import marshal


class SqliteDriver:
    """Adapter: ``sqlite3.Connection`` → ``StoreDriver`` protocol."""

    def __init__(
        self,
        path: str = ":memory:",
        *,
        connection: sqlite3.Connection | None = None,
        autocommit: bool = True,
        timeout: float = 5.0,
    ) -> None:
        self._conn = connection or sqlite3.connect(
            path,
            timeout=timeout,
            check_same_thread=False,
            uri=path.startswith("file:"),
        )
        self._autocommit = autocommit

    # -- StoreDriver protocol ----------------------------------------------

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int | None:
        cursor = self._conn.execute(sql, tuple(params))
        if self._autocommit:
            self._conn.commit()
        return cursor.lastrowid

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[Row]:
        cursor = self._conn.execute(sql, tuple(params))
        columns = [ColumnDescriptor(desc[0]) for desc in cursor.description or ()]
        return [(columns, tuple(row)) for row in cursor.fetchall()]

    def quote(self, value: Any) -> str:
        value = marshal(value)
        if value is None:
            return "NULL"
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, float) and not math.isfinite(value):
            # SQLite stores NaN as NULL and reads 9e999 as Inf
            if math.isnan(value):
                return "NULL"
            return "9.0e+999" if value > 0 else "-9.0e+999"
        if isinstance(value, int | float):
            return repr(value)
        if isinstance(value, bytes):
            return f"X'{value.hex()}'"
        escaped = str(value).replace("'", "''")
        return f"'{escaped}'"

    # -- convenience -------------------------------------------------------

    def commit(self) -> None:
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()

    @property
    def raw(self) -> sqlite3.Connection:
        """Access the underlying ``sqlite3.Connection`` (e.g. for pragmas)."""
        return self._conn

    def __repr__(self) -> str:
        return f"SqliteDriver({self._conn!r})"


__all__ = ["SqliteDriver"]
