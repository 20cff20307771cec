"""
Field-level constraint markers.

Markers are attached to record fields through :data:`typing.Annotated`::

    class Post(Entity):
        id: Annotated[int | None, primary_key(), auto_increment()]
        slug: Annotated[str, unique(), indexed()]
        created: Annotated[datetime, sql_default(DefaultConstant.CURRENT_TIMESTAMP)]
        updated: Annotated[
            datetime,
            sql_default(DefaultConstant.CURRENT_TIMESTAMP),
            sql_on_update(DefaultConstant.CURRENT_TIMESTAMP),
        ]

Every marker is a :class:`Marker` tagged with a :class:`MarkerKind`.
Consumers (schema generation, statement building, validation) dispatch on
the tag through handler tables rather than on marker classes.

Marker effects:
    - ``primary_key``: key used in WHERE clauses; exactly one per type
    - ``auto_increment``: ``AUTOINCREMENT`` column constraint
    - ``unique``: ``UNIQUE`` column constraint
    - ``indexed``: separate ``CREATE INDEX "idx_<column>"`` statement
    - ``sql_type``: overrides the derived column type
    - ``sql_default``: ``DEFAULT (...)`` clause; named constants are rendered
      as SQL expressions, other values are quoted by the driver
    - ``sql_on_update``: on UPDATE only, replaces the in-memory field value
      (named constants inline, other values bound)

Tags:
    markers, annotations, constraints, entityspine
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class MarkerKind(str, Enum):
    """Tag identifying what a :class:`Marker` does."""

    PRIMARY_KEY = "primary_key"
    AUTO_INCREMENT = "auto_increment"
    UNIQUE = "unique"
    INDEXED = "indexed"
    SQL_TYPE = "sql_type"
    SQL_DEFAULT = "sql_default"
    SQL_ON_UPDATE = "sql_on_update"


class DefaultConstant(str, Enum):
    """Symbolic values rendered as SQL expressions instead of bound values.

    The concrete expression comes from the active dialect, e.g.
    ``CURRENT_TIMESTAMP`` is ``datetime('now')`` on SQLite.
    """

    CURRENT_TIMESTAMP = "current_timestamp"


@dataclass(frozen=True)
class Marker:
    """A single constraint marker attached to a field."""

    kind: MarkerKind
    value: Any = None

    @property
    def is_constant(self) -> bool:
        """True when the marker value is a named :class:`DefaultConstant`."""
        return isinstance(self.value, DefaultConstant)


def primary_key() -> Marker:
    return Marker(MarkerKind.PRIMARY_KEY)


def auto_increment() -> Marker:
    return Marker(MarkerKind.AUTO_INCREMENT)


def unique() -> Marker:
    return Marker(MarkerKind.UNIQUE)


def indexed() -> Marker:
    return Marker(MarkerKind.INDEXED)


def sql_type(type_: str) -> Marker:
    """Override the column SQL type, e.g. ``sql_type("real")``."""
    return Marker(MarkerKind.SQL_TYPE, type_)


def sql_default(value: Any) -> Marker:
    """Emit a ``DEFAULT`` clause with a literal or :class:`DefaultConstant`."""
    return Marker(MarkerKind.SQL_DEFAULT, value)


def sql_on_update(value: Any) -> Marker:
    """Value written on every UPDATE instead of the field's current value."""
    return Marker(MarkerKind.SQL_ON_UPDATE, value)


__all__ = [
    "MarkerKind",
    "DefaultConstant",
    "Marker",
    "primary_key",
    "auto_increment",
    "unique",
    "indexed",
    "sql_type",
    "sql_default",
    "sql_on_update",
]
