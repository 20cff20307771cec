"""
DDL generation from record metadata.

Produces one ``CREATE TABLE`` statement followed by one ``CREATE INDEX``
per ``indexed`` field, in field declaration order.

Column definitions::

    "<column>" <type>[ NOT NULL][ DEFAULT (<expr>)][ PRIMARY KEY][ AUTOINCREMENT][ UNIQUE]

    - <type>: ``sql_type`` override, else derived from the field kind
    - NOT NULL: omitted for nullable fields
    - remaining clauses follow marker declaration order; repeated markers
      repeat their clause

Type mapping:
    ==============  ==========
    INTEGER         integer
    TEXT            string
    DATETIME        datetime
    STRUCTURED      json
    ==============  ==========

    Other kinds (REAL, BOOLEAN, CUSTOM) need an explicit ``sql_type``;
    without one generation fails with :class:`SchemaError`.

Example output for a record type named ``Test``::

    CREATE TABLE "test" ("id" integer PRIMARY KEY, "value" string NOT NULL,
                         "has_default" string NOT NULL DEFAULT ('bar'))

Tags:
    schema, ddl, create-table, index, entityspine
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from entityspine.dialect import Dialect, SQLiteDialect
from entityspine.errors import SchemaError
from entityspine.logging import get_logger
from entityspine.markers import Marker, MarkerKind
from entityspine.metadata import EntityMetadata, FieldKind, FieldMetadata

logger = get_logger(__name__)

QuoteLiteral = Callable[[Any], str]

_COLUMN_TYPES: dict[FieldKind, str] = {
    FieldKind.INTEGER: "integer",
    FieldKind.TEXT: "string",
    FieldKind.DATETIME: "datetime",
    FieldKind.STRUCTURED: "json",
}


class SchemaGenerator:
    """Builds ordered DDL statements for a record type.

    Parameters:
        dialect: SQL dialect; defaults to :class:`SQLiteDialect`.
    """

    def __init__(self, dialect: Dialect | None = None) -> None:
        self.dialect: Dialect = dialect or SQLiteDialect()
        self._clauses: dict[MarkerKind, Callable[[Marker, QuoteLiteral], str]] = {
            MarkerKind.SQL_DEFAULT: self._default_clause,
            MarkerKind.PRIMARY_KEY: lambda marker, quote: "PRIMARY KEY",
            MarkerKind.AUTO_INCREMENT: lambda marker, quote: "AUTOINCREMENT",
            MarkerKind.UNIQUE: lambda marker, quote: "UNIQUE",
        }

    def _default_clause(self, marker: Marker, quote_literal: QuoteLiteral) -> str:
        if marker.is_constant:
            expression = self.dialect.render_constant(marker.value)
        else:
            expression = quote_literal(marker.value)
        return f"DEFAULT ({expression})"

    def column_type(self, field: FieldMetadata) -> str:
        """``sql_type`` override, else the mapped kind.

        Raises:
            SchemaError: No override and no mapping for the field kind.
        """
        override = field.first(MarkerKind.SQL_TYPE)
        if override is not None:
            return override.value
        if field.kind in _COLUMN_TYPES:
            return _COLUMN_TYPES[field.kind]
        raise SchemaError(
            f"No column type for field '{field.name}' of kind '{field.kind.value}'; "
            f"declare one with sql_type()"
        )

    def column_definition(self, field: FieldMetadata, quote_literal: QuoteLiteral) -> str:
        parts = [self.dialect.quote_identifier(field.column), self.column_type(field)]
        if not field.nullable:
            parts.append("NOT NULL")
        for marker in field.markers:
            handler = self._clauses.get(marker.kind)
            if handler is not None:
                parts.append(handler(marker, quote_literal))
        return " ".join(parts)

    def create_statements(
        self, metadata: EntityMetadata, quote_literal: QuoteLiteral
    ) -> list[str]:
        """CREATE TABLE followed by one CREATE INDEX per indexed field."""
        metadata.primary_key  # SchemaError unless exactly one key
        table = self.dialect.quote_identifier(metadata.schema_name)
        try:
            columns = [self.column_definition(f, quote_literal) for f in metadata.fields]
        except SchemaError as e:
            raise e.with_context(entity=metadata.entity.__name__, schema=metadata.schema_name)

        statements = [f"CREATE TABLE {table} ({', '.join(columns)})"]
        for field in metadata.fields:
            if field.has(MarkerKind.INDEXED):
                index = self.dialect.quote_identifier(f"idx_{field.column}")
                column = self.dialect.quote_identifier(field.column)
                statements.append(f"CREATE INDEX {index} ON {table} ({column})")

        for statement in statements:
            logger.debug("schema_generated", schema=metadata.schema_name, sql=statement)
        return statements


__all__ = ["SchemaGenerator"]
