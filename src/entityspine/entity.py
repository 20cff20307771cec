"""
Base class for mapped record types.

A record instance tracks which fields are *initialized*: a field is
initialized once a value (including ``None``) has been assigned, either by
the caller, by a class-level default, or by hydration. Reading an
uninitialized field raises ``AttributeError``. Uninitialized fields are left
out of INSERT statements so the store applies its own defaults.

Usage::

    from datetime import datetime
    from typing import Annotated

    from entityspine import Entity, primary_key, sql_default

    class Post(Entity):
        id: Annotated[int | None, primary_key()]
        title: str
        status: Annotated[str, sql_default("draft")]
        note: str | None = None

    post = Post.create(title="hello")
    post.is_initialized("status")     # False, the store default applies
    post.note                         # None, initialized by the class default

Tags:
    entity, record, orm, entityspine
"""

from __future__ import annotations

import copy
from collections.abc import Sequence
from typing import Any, ClassVar, Self

from entityspine.errors import ValidationError
from entityspine.hydration import RowHydrator
from entityspine.metadata import EntityMetadata, get_inspector
from entityspine.protocols import ColumnDescriptor


class Entity:
    """Base class for record types mapped to a single table.

    Subclasses declare fields as annotations; see
    :mod:`entityspine.metadata` for the declaration rules.

    Records compare equal by type and initialized values and are
    unhashable, since their fields stay assignable.
    """

    __schema_name__: ClassVar[str | None] = None

    def __init__(self, **values: Any) -> None:
        metadata = self.metadata()
        for field in metadata.fields:
            if field.has_default:
                self.__dict__[field.name] = copy.copy(field.default)
        for name, value in values.items():
            if metadata.field(name) is None:
                raise ValidationError(
                    f"Unknown field '{name}' for '{type(self).__name__}'", field=name
                )
            self.__dict__[name] = value

    # -- Type-level metadata ------------------------------------------------

    @classmethod
    def metadata(cls) -> EntityMetadata:
        return get_inspector().inspect(cls)

    @classmethod
    def schema_name(cls) -> str:
        return cls.metadata().schema_name

    @classmethod
    def primary_key_name(cls) -> str:
        return cls.metadata().primary_key.name

    # -- Construction -------------------------------------------------------

    @classmethod
    def create(cls, **values: Any) -> Self:
        """Build a record and check that it can be inserted.

        Raises:
            ValidationError: A field is unknown, or a field that is neither
                nullable, defaulted by the store, nor the primary key was
                left uninitialized.
        """
        record = cls(**values)
        RowHydrator().validate_construction(record)
        return record

    @classmethod
    def from_row(
        cls,
        columns: Sequence[ColumnDescriptor],
        values: Sequence[Any],
        *,
        hydrator: RowHydrator | None = None,
    ) -> Self:
        """Hydrate a record from one result row."""
        return (hydrator or RowHydrator()).hydrate(cls.metadata(), columns, values)

    # -- Instance state -----------------------------------------------------

    def is_initialized(self, name: str) -> bool:
        return name in self.__dict__

    def initialized_fields(self) -> dict[str, Any]:
        """Field name → value for every initialized field, in declaration order."""
        return {
            field.name: self.__dict__[field.name]
            for field in self.metadata().fields
            if field.name in self.__dict__
        }

    def set_field(
        self,
        name: str,
        value: Any,
        column: ColumnDescriptor | None = None,
        *,
        hydrator: RowHydrator | None = None,
    ) -> None:
        """Assign a raw column value to *name*, applying type coercion."""
        field = self.metadata().field(name)
        if field is None:
            raise ValidationError(f"Unknown field '{name}' for '{type(self).__name__}'", field=name)
        self.__dict__[name] = (hydrator or RowHydrator()).coerce(field, value, column)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.initialized_fields() == other.initialized_fields()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        values = ", ".join(f"{k}={v!r}" for k, v in self.initialized_fields().items())
        return f"{type(self).__name__}({values})"


__all__ = ["Entity"]
