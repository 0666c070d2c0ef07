"""Exception taxonomy for header-line encoding.

Only shape problems are errors. Nil values, missing tags, empty collections
and zero values are normal cases handled by policy.

Exceptions raised inside a custom ``encode_header`` hook are never wrapped:
they reach the caller unchanged.
"""

from __future__ import annotations

from typing import Any


class HeaderLinesError(Exception):
    """Base class for all headerlines errors."""


class InvalidInputShapeError(HeaderLinesError, TypeError):
    """The top-level value is neither None nor a record instance."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(
            f"header_lines() expects a dataclass or pydantic model instance, "
            f"got {type(value).__name__}"
        )


class InvalidFieldTypeError(HeaderLinesError, TypeError):
    """A field annotation cannot be turned into a field plan.

    Raised for annotations that fail to evaluate and for wrapper chains deeper
    than the encoder unwraps.
    """

    def __init__(self, owner: type, field_name: str, reason: str) -> None:
        self.owner = owner
        self.field_name = field_name
        super().__init__(f"{owner.__qualname__}.{field_name}: {reason}")


class MarshalerResultError(HeaderLinesError, TypeError):
    """An ``encode_header`` hook returned something other than a list."""

    def __init__(self, marshaler: Any, result: Any) -> None:
        self.marshaler = marshaler
        self.result = result
        super().__init__(
            f"{type(marshaler).__qualname__}.encode_header() must return a list, "
            f"got {type(result).__name__}"
        )


class ConfigError(HeaderLinesError):
    """A settings file could not be read or parsed."""
