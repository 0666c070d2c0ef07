"""Tests for the HeaderMarshaler capability checks."""

from __future__ import annotations

from headerlines.domain.marshal import HeaderMarshaler, is_marshaler, is_marshaler_type


class Stamp:
    def encode_header(self, key: str, lines: list[str]) -> list[str]:
        return [*lines, f"{key}: stamp"]


class NotCallable:
    encode_header = "nope"


class TestMarshalerChecks:
    def test_instance(self) -> None:
        assert is_marshaler(Stamp())
        assert isinstance(Stamp(), HeaderMarshaler)

    def test_class_is_not_an_instance(self) -> None:
        assert not is_marshaler(Stamp)

    def test_plain_values(self) -> None:
        assert not is_marshaler("x")
        assert not is_marshaler(None)

    def test_types(self) -> None:
        assert is_marshaler_type(Stamp)
        assert not is_marshaler_type(NotCallable)
        assert not is_marshaler_type(str)
        assert not is_marshaler_type(Stamp())
