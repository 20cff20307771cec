"""
Row hydration: raw column values to typed record instances.

Architecture:
    ::

        hydrate(metadata, columns, values)

        PENDING ──► POPULATING ──► VALIDATED
                        │
                        └──────► FAILED   (first coercion/validation error)

        per column:
            column.name ──snake_to_camel──► field
            (columns without a field are skipped)
            value ──_COERCERS[field.kind]──► record.<field>

        after all columns:
            every field initialized, else ValidationError(field)

Coercion table:
    ==============  =============================================================
    DATETIME        str → ISO-8601 parse; int → Unix seconds; float → Unix
                    seconds with microseconds; naive results get the
                    configured default timezone
    STRUCTURED      str/bytes → JSON decode (objects become dicts)
    CUSTOM          ``T.from_column(value, column)``; its errors become DecodeError
    others          assigned unchanged
    ==============  =============================================================

    ``None`` is only accepted by nullable fields and never reaches a coercer.

Tags:
    hydration, coercion, datetime, json, entityspine
"""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from datetime import UTC, datetime, timedelta, tzinfo
from enum import Enum
from typing import TYPE_CHECKING, Any

from entityspine.errors import DecodeError, EntitySpineError, ValidationError
from entityspine.logging import get_logger
from entityspine.markers import MarkerKind
from entityspine.metadata import EntityMetadata, FieldKind, FieldMetadata
from entityspine.protocols import ColumnDescriptor
from entityspine.settings import get_settings

if TYPE_CHECKING:
    from entityspine.entity import Entity

logger = get_logger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class HydrationState(str, Enum):
    """Lifecycle of a single hydration call."""

    PENDING = "pending"
    POPULATING = "populating"
    VALIDATED = "validated"
    FAILED = "failed"


# =============================================================================
# COERCERS
# =============================================================================


def _to_datetime(
    hydrator: RowHydrator, field: FieldMetadata, value: Any, column: ColumnDescriptor
) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, bool):
        raise DecodeError(
            f"Unable to convert {value!r} to datetime for field '{field.name}'",
            field=field.name,
            value=value,
        )
    elif isinstance(value, int | float):
        try:
            return _EPOCH + timedelta(seconds=value)
        except (OverflowError, ValueError) as e:
            raise DecodeError(
                f"Timestamp {value!r} out of range for field '{field.name}'",
                field=field.name,
                value=value,
                cause=e,
            ) from e
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise DecodeError(
                f"Malformed datetime {value!r} for field '{field.name}'",
                field=field.name,
                value=value,
                cause=e,
            ) from e
    else:
        raise DecodeError(
            f"Unable to convert {value!r} to datetime for field '{field.name}'",
            field=field.name,
            value=value,
        )

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=hydrator.default_timezone)
    return parsed


def _to_structured(
    hydrator: RowHydrator, field: FieldMetadata, value: Any, column: ColumnDescriptor
) -> Any:
    if isinstance(value, list | dict):
        return value
    if not isinstance(value, str | bytes | bytearray):
        raise DecodeError(
            f"Unable to convert {value!r} to structured value for field '{field.name}'",
            field=field.name,
            value=value,
        )
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise DecodeError(
            f"Malformed JSON for field '{field.name}': {e.msg}",
            field=field.name,
            value=value,
            cause=e,
        ) from e


def _to_custom(
    hydrator: RowHydrator, field: FieldMetadata, value: Any, column: ColumnDescriptor
) -> Any:
    try:
        return field.python_type.from_column(value, column)
    except EntitySpineError:
        raise
    except Exception as e:
        raise DecodeError(
            f"Unable to convert {value!r} to {field.python_type.__name__} for field '{field.name}'",
            field=field.name,
            value=value,
            cause=e,
        ) from e


def _unchanged(
    hydrator: RowHydrator, field: FieldMetadata, value: Any, column: ColumnDescriptor
) -> Any:
    return value


Coercer = Callable[["RowHydrator", FieldMetadata, Any, ColumnDescriptor], Any]

_COERCERS: dict[FieldKind, Coercer] = {
    FieldKind.DATETIME: _to_datetime,
    FieldKind.STRUCTURED: _to_structured,
    FieldKind.CUSTOM: _to_custom,
    FieldKind.INTEGER: _unchanged,
    FieldKind.TEXT: _unchanged,
    FieldKind.REAL: _unchanged,
    FieldKind.BOOLEAN: _unchanged,
}


# =============================================================================
# HYDRATOR
# =============================================================================


class RowHydrator:
    """Builds record instances from raw rows and validates record completeness.

    Parameters:
        default_timezone: Zone attached to naive datetimes. Defaults to the
            ``default_timezone`` setting.

    Examples:
        >>> hydrator = RowHydrator()
        >>> post = hydrator.hydrate(
        ...     Post.metadata(),
        ...     [ColumnDescriptor("id"), ColumnDescriptor("title")],
        ...     [1, "hello"],
        ... )
        >>> hydrator.state
        <HydrationState.VALIDATED: 'validated'>
    """

    def __init__(self, *, default_timezone: tzinfo | None = None) -> None:
        if default_timezone is None:
            default_timezone = get_settings().tzinfo
        self.default_timezone = default_timezone
        self.state = HydrationState.PENDING

    def coerce(
        self,
        field: FieldMetadata,
        value: Any,
        column: ColumnDescriptor | None = None,
    ) -> Any:
        """Convert a raw column value into the field's declared type."""
        if value is None:
            if not field.nullable:
                raise ValidationError(f"Field '{field.name}' is not nullable", field=field.name)
            return None
        return _COERCERS[field.kind](self, field, value, column or ColumnDescriptor(field.column))

    def hydrate(
        self,
        metadata: EntityMetadata,
        columns: Sequence[ColumnDescriptor],
        values: Sequence[Any],
    ) -> Entity:
        """Construct a fully initialized record from one result row.

        Raises:
            ValidationError: A non-nullable field received ``None`` or a field
                was left uninitialized (e.g. missing column).
            DecodeError: A datetime or JSON payload was malformed, a Unix
                timestamp was out of range, or a custom type rejected its value.
        """
        self.state = HydrationState.PENDING
        record = metadata.entity()
        self.state = HydrationState.POPULATING
        try:
            for column, value in zip(columns, values, strict=False):
                field = metadata.field_for_column(column.name)
                if field is None:
                    continue
                record.__dict__[field.name] = self.coerce(field, value, column)

            for field in metadata.fields:
                if not record.is_initialized(field.name):
                    raise ValidationError(
                        f"Field '{field.name}' not initialized", field=field.name
                    )
        except Exception as e:
            self.state = HydrationState.FAILED
            logger.warning(
                "hydration_failed",
                schema=metadata.schema_name,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise

        self.state = HydrationState.VALIDATED
        return record

    def validate_construction(self, record: Entity) -> None:
        """Check an explicitly created record before it is written.

        Every field must be initialized unless it is nullable, carries
        ``sql_default`` or is the primary key.
        """
        for field in record.metadata().fields:
            if (
                not record.is_initialized(field.name)
                and not field.nullable
                and not field.has(MarkerKind.SQL_DEFAULT)
                and not field.is_primary_key
            ):
                raise ValidationError(f"Field '{field.name}' not initialized", field=field.name)


__all__ = ["HydrationState", "RowHydrator"]
