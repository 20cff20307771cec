"""
Structured error types for entityspine.

Every failure raised by the mapper is an :class:`EntitySpineError` carrying a
category, a structured context and an optional chained cause, so callers can
route, log and report mapper failures without parsing messages.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                     EntitySpineError                          │
        │            (category, context, cause)                         │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  SchemaError        ValidationError       DecodeError         │
        │  (SCHEMA)           (VALIDATION, field)   (DECODE, field)     │
        │                                                               │
        │  NotFoundError      DriverError                               │
        │  (NOT_FOUND, key)   (DRIVER, cause)                           │
        └──────────────────────────────────────────────────────────────┘

Semantics:
    - **SchemaError:** the record type cannot be mapped (no or ambiguous
      primary key, unsupported annotation, no derivable column type).
    - **ValidationError:** a record instance is incomplete or a non-nullable
      field received ``None``.
    - **DecodeError:** a raw column value could not be decoded (malformed JSON
      or datetime payload).
    - **NotFoundError:** a primary-key lookup returned no row.
    - **DriverError:** an opaque failure surfaced by the store driver.

    None of these are retried by the library. Multi-statement operations
    (schema creation) may leave a prefix of statements applied.

Examples:
    >>> error = ValidationError("Field 'value' not initialized", field="value")
    >>> error.to_dict()["field"]
    'value'

    >>> try:
    ...     raise sqlite3.OperationalError("no such table: post")
    ... except sqlite3.OperationalError as e:
    ...     raise DriverError("Statement failed", cause=e)
    Traceback (most recent call last):
    ...
    DriverError: Statement failed

Tags:
    error-handling, exception-hierarchy, entityspine, orm
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    SCHEMA = "SCHEMA"            # Record type cannot be mapped
    VALIDATION = "VALIDATION"    # Incomplete or invalid record data
    DECODE = "DECODE"            # Malformed raw column payload
    NOT_FOUND = "NOT_FOUND"      # Primary-key lookup returned nothing
    DRIVER = "DRIVER"            # Store driver failure
    INTERNAL = "INTERNAL"        # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        entity: Name of the record type involved
        schema: Table name involved
        operation: Repository/statement operation (``add``, ``update``, ...)
        sql: Statement text, when one had been built
        metadata: Additional key-value pairs
    """

    entity: str | None = None
    schema: str | None = None
    operation: str | None = None
    sql: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["entity", "schema", "operation", "sql"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class EntitySpineError(Exception):
    """
    Base exception for all entityspine errors.

    Subclasses set ``default_category``. Instances carry:

    - **category:** :class:`ErrorCategory` for routing
    - **context:** :class:`ErrorContext` with structured metadata
    - **cause:** optional underlying exception, also set as ``__cause__``

    Examples:
        >>> error = EntitySpineError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(schema="post").context.schema
        'post'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> EntitySpineError:
        """
        Add context to this error (fluent API).

        Usage:
            raise SchemaError("No primary key").with_context(entity="Post")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# MAPPING ERRORS
# =============================================================================


class SchemaError(EntitySpineError):
    """The record type cannot be mapped to a table."""

    default_category = ErrorCategory.SCHEMA


class ValidationError(EntitySpineError):
    """
    Record data validation error.

    ``field`` names the offending record field so callers can report it
    without parsing the message.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(self, message: str, *, field: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class DecodeError(EntitySpineError):
    """A raw column value could not be decoded into the field's type."""

    default_category = ErrorCategory.DECODE

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


# =============================================================================
# STORE ERRORS
# =============================================================================


class NotFoundError(EntitySpineError):
    """No row exists for the requested primary key."""

    default_category = ErrorCategory.NOT_FOUND

    def __init__(self, schema: str, key: Any, message: str | None = None):
        self.schema = schema
        self.key = key
        super().__init__(message or f"No row in '{schema}' with primary key {key!r}")
        self.context.schema = schema


class DriverError(EntitySpineError):
    """Failure surfaced by the store driver; never interpreted or retried."""

    default_category = ErrorCategory.DRIVER


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "EntitySpineError",
    "SchemaError",
    "ValidationError",
    "DecodeError",
    "NotFoundError",
    "DriverError",
]
