"""Naming-convention translation between field names and column names.

Columns are snake_case; record fields may be camelCase or PascalCase.
Both directions are pure functions, but they are not exact inverses for
identifiers containing runs of uppercase letters (``HTTPCode``) or a leading
underscore.

Examples:
    >>> camel_to_snake("hasDefault")
    'has_default'
    >>> camel_to_snake("BlogPost")
    'blog_post'
    >>> snake_to_camel("date_time")
    'dateTime'
"""

from __future__ import annotations

import re

_UPPER_NOT_FIRST = re.compile(r"(?<!^)([A-Z])")


def camel_to_snake(name: str) -> str:
    """camelCase / PascalCase to snake_case.

    Inserts ``_`` before every uppercase letter that is not the first
    character, then lowercases the result.
    """
    return _UPPER_NOT_FIRST.sub(r"_\1", name).lower()


def snake_to_camel(name: str) -> str:
    """snake_case to camelCase.

    Splits on ``_``, capitalizes every segment after the first and lowercases
    the first letter of the result.
    """
    head, *rest = name.split("_")
    joined = head + "".join(segment[:1].upper() + segment[1:] for segment in rest)
    return joined[:1].lower() + joined[1:]


__all__ = ["camel_to_snake", "snake_to_camel"]
