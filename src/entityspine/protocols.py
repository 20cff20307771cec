"""
Protocol definitions for the collaborators entityspine talks to.

Architecture:
    ::

        protocols.py
        ├── ColumnDescriptor   — column name + declared type reported by a store
        ├── StoreDriver        — statement execution, row iteration, quoting
        └── CustomColumnType   — user types that build themselves from a column

    Implementations:
        drivers/sqlite.py      → SqliteDriver (sqlite3)
        drivers/sqlalchemy.py  → SQLAlchemyDriver (SQLAlchemy Connection)

Guardrails:
    ❌ DON'T: Import a database driver in mapper code
    ✅ DO: Depend on StoreDriver; drivers live under entityspine.drivers

Tags:
    protocol, driver, connection, entityspine, contracts
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class ColumnDescriptor:
    """Column metadata reported by the store for a result row.

    Only used for name translation and handed to custom column types;
    semantic typing always comes from the record's declared fields.
    """

    name: str
    decl_type: str | None = None


Row = tuple[Sequence[ColumnDescriptor], Sequence[Any]]


@runtime_checkable
class StoreDriver(Protocol):
    """
    Minimal synchronous store interface required by the Repository.

    Examples:
        >>> key = driver.execute('INSERT INTO "post" ("title") VALUES (?)', ("hi",))
        >>> for columns, values in driver.query('SELECT * FROM "post"'):
        ...     print(columns[0].name, values[0])
    """

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int | None:
        """Execute a statement and return the last generated key, if any."""
        ...

    def query(self, sql: str, params: Sequence[Any] = ()) -> Iterable[Row]:
        """Execute a SELECT and yield ``(columns, values)`` per row."""
        ...

    def quote(self, value: Any) -> str:
        """Render *value* as an escaped SQL literal."""
        ...


@runtime_checkable
class CustomColumnType(Protocol):
    """A field type that constructs itself from a raw column value.

    Instances are written back through ``str()``, so implementations should
    define ``__str__`` to produce the stored form.
    """

    @classmethod
    def from_column(cls, value: Any, column: ColumnDescriptor) -> Any:
        ...


__all__ = [
    "ColumnDescriptor",
    "Row",
    "StoreDriver",
    "CustomColumnType",
]
