"""entityspine -- metadata-driven entity mapping for SQL stores.

Manifesto:
    Application code should describe its records once. Table layout,
    column constraints, CRUD statements and row decoding all follow from
    the record declaration instead of being written (and drifting) by hand.

    - **Declarations are the schema:** ``Annotated`` markers carry constraints
    - **Metadata once:** derived per type and cached
    - **Explicit store handle:** drivers are passed in, never global
    - **Typed failures:** every error is an :class:`EntitySpineError`

Architecture::

    Layer 1 -- Declarations
        markers.py         primary_key(), sql_default(), ... + DefaultConstant
        entity.py          Entity base class, uninitialized-field tracking
        naming.py          snake_case <-> camelCase

    Layer 2 -- Metadata & SQL
        metadata.py        MetadataInspector, EntityMetadata, FieldMetadata
        schema.py          SchemaGenerator (CREATE TABLE / CREATE INDEX)
        statements.py      StatementBuilder (INSERT / UPDATE / DELETE / SELECT)
        dialect.py         identifier quoting, placeholders, constants

    Layer 3 -- Store
        hydration.py       RowHydrator (rows -> typed records)
        repository.py      Repository[E] CRUD
        protocols.py       StoreDriver, ColumnDescriptor, CustomColumnType
        drivers/           SqliteDriver, SQLAlchemyDriver

    Layer 4 -- Cross-Cutting
        errors.py          EntitySpineError hierarchy
        logging.py         structlog configuration
        settings.py        EntitySpineSettings (pydantic-settings)
        cli.py             typer CLI

Examples:
    >>> from typing import Annotated
    >>> from entityspine import Entity, Repository, SqliteDriver, primary_key
    >>> class Note(Entity):
    ...     id: Annotated[int | None, primary_key()]
    ...     text: str
    >>> repo = Repository(SqliteDriver(), Note)
    >>> repo.create_schema()
    >>> repo.add(Note.create(text="hi")).id
    1

Tags:
    orm, entity, schema, sql, entityspine
"""

from entityspine.dialect import Dialect, PostgreSQLDialect, SQLiteDialect, get_dialect
from entityspine.drivers import SQLAlchemyDriver, SqliteDriver
from entityspine.entity import Entity
from entityspine.errors import (
    DecodeError,
    DriverError,
    EntitySpineError,
    ErrorCategory,
    NotFoundError,
    SchemaError,
    ValidationError,
)
from entityspine.hydration import HydrationState, RowHydrator
from entityspine.logging import configure_logging, get_logger
from entityspine.markers import (
    DefaultConstant,
    Marker,
    MarkerKind,
    auto_increment,
    indexed,
    primary_key,
    sql_default,
    sql_on_update,
    sql_type,
    unique,
)
from entityspine.metadata import EntityMetadata, FieldKind, FieldMetadata, MetadataInspector
from entityspine.protocols import ColumnDescriptor, CustomColumnType, StoreDriver
from entityspine.repository import Repository
from entityspine.schema import SchemaGenerator
from entityspine.settings import EntitySpineSettings, get_settings
from entityspine.statements import Statement, StatementBuilder

__version__ = "0.1.0"

__all__ = [
    # declarations
    "Entity",
    "Marker",
    "MarkerKind",
    "DefaultConstant",
    "primary_key",
    "auto_increment",
    "unique",
    "indexed",
    "sql_type",
    "sql_default",
    "sql_on_update",
    # metadata & sql
    "MetadataInspector",
    "EntityMetadata",
    "FieldMetadata",
    "FieldKind",
    "SchemaGenerator",
    "StatementBuilder",
    "Statement",
    "Dialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "get_dialect",
    # store
    "RowHydrator",
    "HydrationState",
    "Repository",
    "StoreDriver",
    "ColumnDescriptor",
    "CustomColumnType",
    "SqliteDriver",
    "SQLAlchemyDriver",
    # errors
    "EntitySpineError",
    "ErrorCategory",
    "SchemaError",
    "ValidationError",
    "DecodeError",
    "NotFoundError",
    "DriverError",
    # cross-cutting
    "EntitySpineSettings",
    "get_settings",
    "configure_logging",
    "get_logger",
]
