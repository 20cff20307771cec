"""
DML statement generation.

Turns record instances (or key values) plus their metadata into
parameterized statements with ordered positional parameters.

Statements::

    insert(post)                → INSERT INTO "post" ("title","body") VALUES (?,?)
    update(post)                → UPDATE "post" SET "title" = ?,"updated" = datetime('now') WHERE "id" = ?
    delete(meta, 3)             → DELETE FROM "post" WHERE "id" = ?
    select_by_primary_key(m, 3) → SELECT * FROM "post" WHERE "id" = ?
    select_all(meta)            → SELECT * FROM "post"

Value marshalling (every bound field value):
    - ``datetime`` → ISO-8601 string
    - ``list`` / ``dict`` → JSON text
    - ``None``, ``str``, ``int``, ``float``, ``bool``, ``bytes`` → unchanged
    - objects defining their own ``__str__`` → ``str(value)``
    - anything else → unchanged

Guardrails:
    ❌ DON'T: Interpolate field values into SQL
    ✅ DO: Bind every value; only named constants are inlined

Tags:
    sql, dml, statements, marshalling, entityspine
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import TYPE_CHECKING, Any, NamedTuple

from entityspine.dialect import Dialect, SQLiteDialect
from entityspine.errors import SchemaError, ValidationError
from entityspine.logging import get_logger
from entityspine.markers import MarkerKind
from entityspine.metadata import EntityMetadata

if TYPE_CHECKING:
    from entityspine.entity import Entity

logger = get_logger(__name__)

_PASSTHROUGH = (str, int, float, bool, bytes)


class Statement(NamedTuple):
    """SQL text plus its ordered positional parameters."""

    sql: str
    params: list[Any]


def marshal(value: Any) -> Any:
    """Convert a field value into something a driver can bind."""
    if value is None or isinstance(value, _PASSTHROUGH):
        return value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, list | dict):
        return json.dumps(value)
    if type(value).__str__ is not object.__str__:
        return str(value)
    return value


class StatementBuilder:
    """Builds single-table CRUD statements for record types.

    Parameters:
        dialect: SQL dialect; defaults to :class:`SQLiteDialect`.
    """

    def __init__(self, dialect: Dialect | None = None) -> None:
        self.dialect: Dialect = dialect or SQLiteDialect()

    def _table(self, metadata: EntityMetadata) -> str:
        return self.dialect.quote_identifier(metadata.schema_name)

    def _built(
        self, metadata: EntityMetadata, operation: str, sql: str, params: list[Any]
    ) -> Statement:
        logger.debug(
            "statement_built", schema=metadata.schema_name, operation=operation, sql=sql
        )
        return Statement(sql, params)

    def _where_key(self, metadata: EntityMetadata) -> str:
        column = self.dialect.quote_identifier(metadata.primary_key.column)
        return f"WHERE {column} = {self.dialect.placeholder()}"

    # -- Writes -------------------------------------------------------------

    def insert(self, record: Entity) -> Statement:
        """INSERT of every initialized field; uninitialized fields are omitted."""
        metadata = record.metadata()
        values = record.initialized_fields()
        table = self._table(metadata)
        if not values:
            return self._built(metadata, "insert", f"INSERT INTO {table} DEFAULT VALUES", [])

        columns = ",".join(
            self.dialect.quote_identifier(metadata.field(name).column) for name in values
        )
        placeholders = self.dialect.placeholders(len(values))
        sql = f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"
        return self._built(metadata, "insert", sql, [marshal(value) for value in values.values()])

    def update(self, record: Entity) -> Statement:
        """UPDATE of every non-key field, keyed on the primary key.

        ``sql_on_update`` markers replace the in-memory value: named constants
        are inlined as SQL, other values are bound.
        """
        metadata = record.metadata()
        key = metadata.primary_key
        if not record.is_initialized(key.name):
            raise ValidationError(
                f"Primary key '{key.name}' not initialized", field=key.name
            )

        assignments: list[str] = []
        params: list[Any] = []
        for field in metadata.fields:
            if field is key:
                continue
            column = self.dialect.quote_identifier(field.column)
            on_update = field.first(MarkerKind.SQL_ON_UPDATE)
            if on_update is not None and on_update.is_constant:
                assignments.append(f"{column} = {self.dialect.render_constant(on_update.value)}")
                continue
            if on_update is not None:
                value = on_update.value
            elif record.is_initialized(field.name):
                value = record.__dict__[field.name]
            else:
                raise ValidationError(f"Field '{field.name}' not initialized", field=field.name)
            assignments.append(f"{column} = {self.dialect.placeholder()}")
            params.append(marshal(value))

        if not assignments:
            raise SchemaError(
                f"Entity '{metadata.entity.__name__}' has no non-key fields to update"
            ).with_context(schema=metadata.schema_name, operation="update")

        params.append(marshal(record.__dict__[key.name]))
        sql = f"UPDATE {self._table(metadata)} SET {','.join(assignments)} {self._where_key(metadata)}"
        return self._built(metadata, "update", sql, params)

    def delete(self, metadata: EntityMetadata, key: Any) -> Statement:
        return self._built(
            metadata,
            "delete",
            f"DELETE FROM {self._table(metadata)} {self._where_key(metadata)}",
            [marshal(key)],
        )

    # -- Reads --------------------------------------------------------------

    def select_by_primary_key(self, metadata: EntityMetadata, key: Any) -> Statement:
        return self._built(
            metadata,
            "select",
            f"SELECT * FROM {self._table(metadata)} {self._where_key(metadata)}",
            [marshal(key)],
        )

    def select_all(self, metadata: EntityMetadata) -> Statement:
        return self._built(metadata, "select_all", f"SELECT * FROM {self._table(metadata)}", [])


__all__ = ["Statement", "StatementBuilder", "marshal"]
