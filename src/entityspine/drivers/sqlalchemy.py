"""SQLAlchemy store driver.

Runs entityspine's generated SQL through a SQLAlchemy ``Connection`` so
any engine SQLAlchemy supports can back a Repository. Statements are sent
with ``exec_driver_sql``, i.e. in the DBAPI's own paramstyle; pair the
driver with the matching :mod:`~entityspine.dialect`.

Usage::

    from entityspine.drivers import SQLAlchemyDriver

    driver = SQLAlchemyDriver.from_url("sqlite:///app.db")
    repo = Repository(driver, Post)

Tags:
    entityspine, sqlalchemy, driver, engine
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import create_engine, literal
from sqlalchemy.engine import Connection

from entityspine.protocols import ColumnDescriptor, Row
from entityspine.statements import marshal


class SQLAlchemyDriver:
    """Adapter: SQLAlchemy ``Connection`` → ``StoreDriver`` protocol.

    Parameters:
        connection: An open SQLAlchemy 2.x ``Connection``.
        autocommit: Commit after every ``execute`` (default ``True``).
    """

    def __init__(self, connection: Connection, *, autocommit: bool = True) -> None:
        self._conn = connection
        self._autocommit = autocommit

    @classmethod
    def from_url(cls, url: str, *, echo: bool = False, **kwargs: Any) -> SQLAlchemyDriver:
        """Create an engine for *url* and wrap a new connection to it."""
        engine = create_engine(url, echo=echo, **kwargs)
        return cls(engine.connect())

    # -- StoreDriver protocol ----------------------------------------------

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int | None:
        result = self._conn.exec_driver_sql(sql, tuple(params) if params else None)
        key = result.lastrowid
        if self._autocommit:
            self._conn.commit()
        return key

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[Row]:
        result = self._conn.exec_driver_sql(sql, tuple(params) if params else None)
        columns = [ColumnDescriptor(name) for name in result.keys()]
        return [(columns, tuple(row)) for row in result.fetchall()]

    def quote(self, value: Any) -> str:
        value = marshal(value)
        if value is None:
            return "NULL"
        compiled = literal(value).compile(
            dialect=self._conn.dialect,
            compile_kwargs={"literal_binds": True},
        )
        return str(compiled)

    # -- convenience -------------------------------------------------------

    def close(self) -> None:
        self._conn.close()

    @property
    def connection(self) -> Connection:
        return self._conn


__all__ = ["SQLAlchemyDriver"]
