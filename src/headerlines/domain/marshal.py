"""Custom header marshaling capability."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class HeaderMarshaler(Protocol):
    """A value that renders its own header lines.

    ``encode_header`` receives the field's effective key and a copy of the
    lines produced so far, and returns the new accumulated list. Raising
    aborts the whole encode.

    Usage::

        class EncodedArgs(list[str]):
            def encode_header(self, key: str, lines: list[str]) -> list[str]:
                return [*lines, *(f"{key}.{i}: {arg}" for i, arg in enumerate(self))]
    """

    def encode_header(self, key: str, lines: list[str]) -> list[str]: ...


def is_marshaler(value: Any) -> bool:
    """True for instances that implement ``encode_header``."""
    return not isinstance(value, type) and isinstance(value, HeaderMarshaler)


def is_marshaler_type(tp: Any) -> bool:
    """True for classes whose instances implement ``encode_header``."""
    return isinstance(tp, type) and callable(getattr(tp, "encode_header", None))
