"""
Record-type metadata introspection.

Turns an annotated record type into an explicit, immutable descriptor that
schema generation, statement building and hydration all work from. The
descriptor is built once per type and cached, so no builder touches
``typing`` introspection on the hot path.

Architecture:
    ::

        class Post(Entity):                        EntityMetadata
            id: Annotated[int | None,              ├── entity       = Post
                          primary_key()]     ──►   ├── schema_name  = "post"
            title: str                             ├── fields       = (FieldMetadata(id, INTEGER, nullable, [PK]),
            body: str | None = None                │                   FieldMetadata(title, TEXT),
                                                   │                   FieldMetadata(body, TEXT, nullable, default=None))
                                                   └── primary_key  = fields[0]

Declaration rules:
    - Every annotated attribute that is not a ``ClassVar`` and does not start
      with ``_`` is a field, in declaration order (base classes first).
    - ``X | None`` / ``Optional[X]`` marks the field nullable.
    - ``Annotated[X, marker, ...]`` attaches markers; non-marker extras are
      ignored.
    - A class-level value is the field's default.
    - ``__schema_name__`` overrides the snake_case table name.
    - A field may not reuse the name of a method or property of the record
      type or its bases (``metadata``, ``create``, ...).

Field kinds:
    ``int`` → INTEGER, ``str`` → TEXT, ``float`` → REAL, ``bool`` → BOOLEAN,
    ``datetime`` → DATETIME, ``list``/``dict`` → STRUCTURED, classes with a
    ``from_column`` classmethod → CUSTOM. Anything else is a SchemaError.

Tags:
    metadata, introspection, annotations, entityspine, schema
"""

from __future__ import annotations

import types
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, ClassVar, Union, get_args, get_origin, get_type_hints

from entityspine.errors import SchemaError
from entityspine.markers import Marker, MarkerKind
from entityspine.naming import camel_to_snake, snake_to_camel

# Marks a field without a class-level default
_NO_DEFAULT: Any = object()


class FieldKind(str, Enum):
    """Declared type kind of a record field."""

    INTEGER = "integer"
    TEXT = "text"
    REAL = "real"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    STRUCTURED = "structured"
    CUSTOM = "custom"


@dataclass(frozen=True)
class FieldMetadata:
    """Descriptor of a single record field."""

    name: str
    column: str
    kind: FieldKind
    python_type: type
    nullable: bool = False
    markers: tuple[Marker, ...] = ()
    order: int = 0
    default: Any = _NO_DEFAULT

    def has(self, kind: MarkerKind) -> bool:
        return any(marker.kind is kind for marker in self.markers)

    def first(self, kind: MarkerKind) -> Marker | None:
        """First marker of *kind* in declaration order."""
        for marker in self.markers:
            if marker.kind is kind:
                return marker
        return None

    @property
    def is_primary_key(self) -> bool:
        return self.has(MarkerKind.PRIMARY_KEY)

    @property
    def has_default(self) -> bool:
        """True when the record type declares a class-level default."""
        return self.default is not _NO_DEFAULT


@dataclass(frozen=True)
class EntityMetadata:
    """Descriptor of a record type: table name plus ordered fields."""

    entity: type
    schema_name: str
    fields: tuple[FieldMetadata, ...]

    @property
    def primary_key(self) -> FieldMetadata:
        """The single field marked ``primary_key``.

        Raises:
            SchemaError: If no field, or more than one, carries the marker.
        """
        keys = [f for f in self.fields if f.is_primary_key]
        if not keys:
            raise SchemaError(
                f"Entity '{self.entity.__name__}' does not have a primary key"
            ).with_context(entity=self.entity.__name__, schema=self.schema_name)
        if len(keys) > 1:
            names = ", ".join(f.name for f in keys)
            raise SchemaError(
                f"Entity '{self.entity.__name__}' has more than one primary key: {names}"
            ).with_context(entity=self.entity.__name__, schema=self.schema_name)
        return keys[0]

    def field(self, name: str) -> FieldMetadata | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def field_for_column(self, column: str) -> FieldMetadata | None:
        """Resolve a reported column name to a field.

        The column is translated to camelCase first; snake_case fields are
        matched on their column name.
        """
        found = self.field(snake_to_camel(column))
        if found is not None:
            return found
        for f in self.fields:
            if f.column == column:
                return f
        return None


# =============================================================================
# TYPE RESOLUTION
# =============================================================================

_SCALAR_KINDS: dict[type, FieldKind] = {
    # bool before int: bool is an int subclass
    bool: FieldKind.BOOLEAN,
    int: FieldKind.INTEGER,
    float: FieldKind.REAL,
    str: FieldKind.TEXT,
    datetime: FieldKind.DATETIME,
}

_STRUCTURED_TYPES = (list, dict)


def _unwrap_annotated(annotation: Any) -> tuple[Any, list[Marker]]:
    if get_origin(annotation) is Annotated:
        base, *extras = get_args(annotation)
        return base, [extra for extra in extras if isinstance(extra, Marker)]
    return annotation, []


_BEHAVIOUR_TYPES = (types.FunctionType, classmethod, staticmethod, property)


def _check_not_shadowing(owner: type, name: str) -> None:
    for klass in owner.__mro__:
        if name in vars(klass):
            if isinstance(vars(klass)[name], _BEHAVIOUR_TYPES):
                raise SchemaError(
                    f"Field '{name}' shadows {klass.__name__}.{name}"
                ).with_context(entity=owner.__name__)
            return


def _resolve_kind(owner: type, name: str, annotation: Any) -> tuple[FieldKind, type]:
    origin = get_origin(annotation)
    if origin in _STRUCTURED_TYPES:
        return FieldKind.STRUCTURED, origin
    if annotation in _STRUCTURED_TYPES:
        return FieldKind.STRUCTURED, annotation
    if isinstance(annotation, type):
        if annotation in _SCALAR_KINDS:
            return _SCALAR_KINDS[annotation], annotation
        if callable(getattr(annotation, "from_column", None)):
            return FieldKind.CUSTOM, annotation
    raise SchemaError(
        f"Unable to map field '{name}' with type {annotation!r}"
    ).with_context(entity=owner.__name__)


def _describe(owner: type, name: str, annotation: Any, order: int) -> FieldMetadata:
    annotation, markers = _unwrap_annotated(annotation)

    nullable = False
    if get_origin(annotation) in (Union, types.UnionType):
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        nullable = len(members) != len(get_args(annotation))
        if len(members) != 1:
            raise SchemaError(
                f"Field '{name}' must declare a single type, got {annotation!r}"
            ).with_context(entity=owner.__name__)
        # Optional[Annotated[X, ...]] carries its markers one level down
        annotation, inner = _unwrap_annotated(members[0])
        markers.extend(inner)

    kind, python_type = _resolve_kind(owner, name, annotation)
    return FieldMetadata(
        name=name,
        column=camel_to_snake(name),
        kind=kind,
        python_type=python_type,
        nullable=nullable,
        markers=tuple(markers),
        order=order,
        default=getattr(owner, name, _NO_DEFAULT),
    )


# =============================================================================
# INSPECTOR
# =============================================================================


class MetadataInspector:
    """Builds and caches :class:`EntityMetadata` per record type.

    Examples:
        >>> inspector = MetadataInspector()
        >>> inspector.schema_name(BlogPost)
        'blog_post'
        >>> [f.name for f in inspector.fields(BlogPost)]
        ['id', 'title', 'body']
    """

    def __init__(self) -> None:
        self._cache: dict[type, EntityMetadata] = {}

    def inspect(self, entity: type) -> EntityMetadata:
        """Return the (cached) metadata of *entity*."""
        metadata = self._cache.get(entity)
        if metadata is None:
            metadata = EntityMetadata(
                entity=entity,
                schema_name=self.schema_name(entity),
                fields=tuple(self._collect_fields(entity)),
            )
            self._cache[entity] = metadata
        return metadata

    def schema_name(self, entity: type) -> str:
        """Explicit ``__schema_name__`` override, else snake_case class name."""
        return getattr(entity, "__schema_name__", None) or camel_to_snake(entity.__name__)

    def primary_key_field(self, entity: type) -> FieldMetadata:
        return self.inspect(entity).primary_key

    def fields(self, entity: type) -> list[FieldMetadata]:
        return list(self.inspect(entity).fields)

    def clear_cache(self) -> None:
        self._cache.clear()

    def _collect_fields(self, entity: type) -> list[FieldMetadata]:
        try:
            hints = get_type_hints(entity, include_extras=True)
        except (NameError, TypeError) as e:
            raise SchemaError(
                f"Unable to resolve annotations of '{entity.__name__}'", cause=e
            ).with_context(entity=entity.__name__)

        fields = []
        for name, annotation in hints.items():
            if name.startswith("_") or get_origin(annotation) is ClassVar:
                continue
            _check_not_shadowing(entity, name)
            fields.append(_describe(entity, name, annotation, len(fields)))
        return fields


_inspector = MetadataInspector()


def get_inspector() -> MetadataInspector:
    """Process-wide inspector shared by :class:`~entityspine.entity.Entity`."""
    return _inspector


__all__ = [
    "FieldKind",
    "FieldMetadata",
    "EntityMetadata",
    "MetadataInspector",
    "get_inspector",
]
