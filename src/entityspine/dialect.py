"""SQL dialect abstraction for statement generation.

Provides a ``Dialect`` protocol and concrete implementations for the
supported backends. Schema and statement builders use ``Dialect`` methods
for identifier quoting, placeholders and named-constant expressions, so
no builder hardcodes backend-specific syntax.

Architecture::

    ┌──────────────────────────────────────────────────────────────────┐
    │  SchemaGenerator / StatementBuilder                               │
    │     d.quote_identifier("post")      → "post"                      │
    │     d.placeholders(2)               → ?,?                         │
    │     d.render_constant(CURRENT_TS)   → datetime('now')             │
    └──────────────────────────────────────────────────────────────────┘
                              │
                              ▼
              ┌──────────────┐        ┌──────────────┐
              │ SQLite       │        │ PostgreSQL   │
              │ ?            │        │ %s           │
              │ datetime()   │        │ NOW()        │
              └──────────────┘        └──────────────┘

Examples:
    >>> from entityspine.dialect import get_dialect
    >>> d = get_dialect("sqlite")
    >>> d.placeholders(3)
    '?,?,?'
    >>> d.quote_identifier("has_default")
    '"has_default"'

Tags:
    dialect, sql, abstraction, portability, entityspine
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from entityspine.markers import DefaultConstant


@runtime_checkable
class Dialect(Protocol):
    """SQL dialect contract.

    Every method returns a **SQL fragment** valid for the target database.
    """

    @property
    def name(self) -> str:
        """Human-readable dialect name (e.g. ``'sqlite'``)."""
        ...

    def placeholder(self) -> str:
        """Single positional placeholder."""
        ...

    def placeholders(self, count: int) -> str:
        """Comma-separated placeholder list."""
        ...

    def quote_identifier(self, name: str) -> str:
        """ANSI double-quoted identifier."""
        ...

    def now(self) -> str:
        """SQL expression for the current timestamp."""
        ...

    def render_constant(self, constant: DefaultConstant) -> str:
        """SQL expression for a named constant."""
        ...


class _AnsiDialect:
    """Shared ANSI behavior: double-quoted identifiers, constant table."""

    _placeholder = "?"

    def placeholder(self) -> str:
        return self._placeholder

    def placeholders(self, count: int) -> str:
        return ",".join(self._placeholder for _ in range(count))

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace('"', '""')
        return f'"{escaped}"'

    def now(self) -> str:
        raise NotImplementedError

    def render_constant(self, constant: DefaultConstant) -> str:
        renderers = {
            DefaultConstant.CURRENT_TIMESTAMP: self.now,
        }
        return renderers[constant]()


class SQLiteDialect(_AnsiDialect):
    """SQLite dialect — ``?`` placeholders, ``datetime('now')``."""

    @property
    def name(self) -> str:
        return "sqlite"

    def now(self) -> str:
        return "datetime('now')"


class PostgreSQLDialect(_AnsiDialect):
    """PostgreSQL dialect — ``%s`` placeholders (psycopg), ``NOW()``."""

    _placeholder = "%s"

    @property
    def name(self) -> str:
        return "postgresql"

    def now(self) -> str:
        return "NOW()"


# =========================================================================
# Registry / Factory
# =========================================================================

# Pre-instantiated singletons (dialects are stateless)
_DIALECTS: dict[str, Dialect] = {
    "sqlite": SQLiteDialect(),
    "postgresql": PostgreSQLDialect(),
    "postgres": PostgreSQLDialect(),  # alias
}


def get_dialect(db_type: str) -> Dialect:
    """Get a dialect by database type name.

    Raises:
        ValueError: If ``db_type`` is not recognised.
    """
    key = db_type.lower()
    if key not in _DIALECTS:
        raise ValueError(
            f"Unknown dialect '{db_type}'. "
            f"Supported: {sorted(set(_DIALECTS) - {'postgres'})}"
        )
    return _DIALECTS[key]


def register_dialect(name: str, dialect: Dialect) -> None:
    """Register a custom dialect implementation (lower-cased key)."""
    _DIALECTS[name.lower()] = dialect


__all__ = [
    "Dialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "get_dialect",
    "register_dialect",
]
