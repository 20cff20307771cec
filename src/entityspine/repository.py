"""Single-table repository over a store driver.

Binds one record type to a :class:`~entityspine.protocols.StoreDriver`
and runs the statements produced by :class:`SchemaGenerator` and
:class:`StatementBuilder`, hydrating results with :class:`RowHydrator`.

Architecture::

    ┌────────────────────────────────────────────────────────────────────┐
    │                       Repository[E]                                │
    │                                                                    │
    │   driver: StoreDriver      ← caller-supplied, never global         │
    │   metadata: EntityMetadata ← MetadataInspector (cached)            │
    │   dialect: Dialect         ← settings.dialect unless given         │
    │                                                                    │
    │   create_schema()          → None     (DDL in order, no rollback)  │
    │   add(record)              → E        (insert + re-select)         │
    │   get(key)                 → E        (NotFoundError if missing)   │
    │   get_all()                → list[E]                               │
    │   update(record)           → E        (update + re-select)         │
    │   delete(record)           → None                                  │
    └────────────────────────────────────────────────────────────────────┘

Usage::

    from entityspine import Repository
    from entityspine.drivers import SqliteDriver

    repo = Repository(SqliteDriver(), Post)
    repo.create_schema()
    post = repo.add(Post.create(title="hello"))
    post.title = "edited"
    repo.update(post)

Guardrails:
    ❌ DON'T: Share one Repository across threads
    ✅ DO: Give each unit of work its own driver and Repository

Tags:
    repository, crud, entityspine
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from entityspine.dialect import Dialect, get_dialect
from entityspine.entity import Entity
from entityspine.errors import (
    DriverError,
    EntitySpineError,
    NotFoundError,
    ValidationError,
)
from entityspine.hydration import RowHydrator
from entityspine.logging import get_logger
from entityspine.protocols import Row, StoreDriver
from entityspine.schema import SchemaGenerator
from entityspine.settings import get_settings
from entityspine.statements import Statement, StatementBuilder

logger = get_logger(__name__)

E = TypeVar("E", bound=Entity)


class Repository(Generic[E]):
    """CRUD access to the table behind one record type.

    Parameters:
        driver: Store handle satisfying :class:`StoreDriver`.
        entity: The record type this repository serves.
        dialect: SQL dialect. Defaults to the ``dialect`` setting.
        hydrator: Row hydrator; a fresh one per repository by default.
    """

    def __init__(
        self,
        driver: StoreDriver,
        entity: type[E],
        *,
        dialect: Dialect | None = None,
        hydrator: RowHydrator | None = None,
    ) -> None:
        self.driver = driver
        self.entity = entity
        self.metadata = entity.metadata()
        self.dialect: Dialect = dialect or get_dialect(get_settings().dialect)
        self.statements = StatementBuilder(self.dialect)
        self.schema = SchemaGenerator(self.dialect)
        self.hydrator = hydrator or RowHydrator()

    # -- Driver access -----------------------------------------------------

    def _wrap(self, e: Exception, operation: str, sql: str) -> DriverError:
        return DriverError(
            f"{operation} on '{self.metadata.schema_name}' failed: {e}",
            cause=e,
        ).with_context(
            entity=self.entity.__name__,
            schema=self.metadata.schema_name,
            operation=operation,
            sql=sql,
        )

    def _execute(self, operation: str, statement: Statement) -> int | None:
        logger.debug(
            "repository_operation",
            schema=self.metadata.schema_name,
            operation=operation,
            sql=statement.sql,
        )
        try:
            return self.driver.execute(statement.sql, statement.params)
        except EntitySpineError:
            raise
        except Exception as e:
            raise self._wrap(e, operation, statement.sql) from e

    def _query(self, operation: str, statement: Statement) -> list[Row]:
        logger.debug(
            "repository_operation",
            schema=self.metadata.schema_name,
            operation=operation,
            sql=statement.sql,
        )
        try:
            return list(self.driver.query(statement.sql, statement.params))
        except EntitySpineError:
            raise
        except Exception as e:
            raise self._wrap(e, operation, statement.sql) from e

    def _hydrate(self, row: Row) -> E:
        columns, values = row
        return self.hydrator.hydrate(self.metadata, columns, values)  # type: ignore[return-value]

    def _key_of(self, record: E) -> Any:
        name = self.metadata.primary_key.name
        if not record.is_initialized(name):
            raise ValidationError(f"Primary key '{name}' not initialized", field=name)
        return record.__dict__[name]

    # -- Schema ------------------------------------------------------------

    def create_schema(self) -> None:
        """Run CREATE TABLE then each CREATE INDEX.

        Statements already executed stay applied if a later one fails.
        """
        for sql in self.schema.create_statements(self.metadata, self.driver.quote):
            self._execute("create_schema", Statement(sql, []))

    # -- CRUD --------------------------------------------------------------

    def add(self, record: E) -> E:
        """Insert *record* and return the stored row as a fresh record."""
        key_name = self.metadata.primary_key.name
        generated = self._execute("add", self.statements.insert(record))
        key = record.__dict__.get(key_name)
        return self.get(generated if key is None else key)

    def get(self, key: Any) -> E:
        """Fetch the record whose primary key equals *key*.

        Raises:
            NotFoundError: No such row.
        """
        rows = self._query("get", self.statements.select_by_primary_key(self.metadata, key))
        if not rows:
            raise NotFoundError(self.metadata.schema_name, key).with_context(
                entity=self.entity.__name__, operation="get"
            )
        return self._hydrate(rows[0])

    def get_all(self) -> list[E]:
        """Every row in the table, in store order."""
        rows = self._query("get_all", self.statements.select_all(self.metadata))
        return [self._hydrate(row) for row in rows]

    def update(self, record: E) -> E:
        """Write every non-key field of *record* and return the stored row."""
        self._execute("update", self.statements.update(record))
        return self.get(self._key_of(record))

    def delete(self, record: E) -> None:
        """Delete the row behind *record*."""
        self._execute("delete", self.statements.delete(self.metadata, self._key_of(record)))

    def __repr__(self) -> str:
        return f"Repository({self.entity.__name__}, dialect={self.dialect.name!r})"


__all__ = ["Repository"]
