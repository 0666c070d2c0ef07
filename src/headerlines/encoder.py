"""Encoder — flattens a record into ordered ``Key: Value`` header lines.

INVARIANT: output order is field declaration order, then element order
within sequences, then container order within header mappings.
INVARIANT: the input value is only read, never mutated.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from headerlines.config.models import EncoderConfig
from headerlines.domain.errors import InvalidInputShapeError, MarshalerResultError
from headerlines.domain.fields import FieldPlan, field_plans, is_record
from headerlines.domain.marshal import HeaderMarshaler, is_marshaler
from headerlines.domain.scalars import format_scalar, is_empty
from headerlines.domain.tags import AS_INT, OMITEMPTY, UNIX, TagOptions

if TYPE_CHECKING:
    from headerlines.config.settings import HeaderLinesSettings

logger = logging.getLogger(__name__)


def is_header_mapping(value: Any) -> bool:
    """True for key -> value(s) containers such as ``dict`` or ``httpx.Headers``."""
    return isinstance(value, Mapping) or callable(getattr(value, "multi_items", None))


class Encoder:
    """Walks records and produces header lines.

    Usage::

        encoder = Encoder(EncoderConfig(sort_mapping_keys=True))
        lines = encoder.encode(request)
    """

    def __init__(self, config: EncoderConfig | None = None) -> None:
        self._config = config or EncoderConfig()

    @classmethod
    def from_settings(cls, settings: HeaderLinesSettings) -> Encoder:
        """Build an encoder from settings and apply their logging options."""
        settings.configure_logging()
        return cls(settings.encoder)

    @property
    def config(self) -> EncoderConfig:
        return self._config

    def encode(self, value: Any) -> list[str]:
        """Encode *value* (a record instance or None) into header lines.

        Raises:
            InvalidInputShapeError: *value* is not a record instance or None.
        """
        if value is None:
            return []
        if not is_record(value):
            raise InvalidInputShapeError(value)
        return self._encode_record(value, [])

    def _line(self, key: str, value: str) -> str:
        return f"{key}{self._config.separator}{value}"

    def _encode_record(self, record: Any, lines: list[str]) -> list[str]:
        for plan in field_plans(type(record), self._config.tag_key):
            value = getattr(record, plan.name)
            if plan.embedded:
                if is_record(value):
                    lines = self._encode_record(value, lines)
                continue
            if plan.skip:
                continue
            lines = self._encode_field(plan, value, lines)
        return lines

    def _encode_field(self, plan: FieldPlan, value: Any, lines: list[str]) -> list[str]:
        if is_marshaler(value):
            return self._marshal(value, plan.key, lines)
        omitempty = plan.options.contains(OMITEMPTY)
        if value is None:
            if plan.marshaler or omitempty:
                return lines
            lines.append(self._line(plan.key, ""))
            return lines
        # A present optional value is never empty, even if its contents are.
        if omitempty and not plan.optional and is_empty(value):
            return lines
        return self._encode_value(plan.key, value, plan.options, lines)

    def _encode_value(
        self, key: str, value: Any, options: TagOptions, lines: list[str]
    ) -> list[str]:
        if value is None:
            lines.append(self._line(key, ""))
        elif is_marshaler(value):
            lines = self._marshal(value, key, lines)
        elif is_record(value):
            lines = self._encode_record(value, lines)
        elif is_header_mapping(value):
            for name, item in self._mapping_items(value):
                lines.append(self._line(str(name), "" if item is None else format_scalar(item)))
        elif isinstance(value, (list, tuple)):
            for element in value:
                lines = self._encode_value(key, element, options, lines)
        else:
            rendered = format_scalar(
                value, as_int=options.contains(AS_INT), unix=options.contains(UNIX)
            )
            lines.append(self._line(key, rendered))
        return lines

    def _mapping_items(self, container: Any) -> Iterator[tuple[Any, Any]]:
        if isinstance(container, Mapping):
            pairs: list[tuple[Any, Any]] = []
            for name, values in container.items():
                if isinstance(values, (list, tuple)):
                    pairs.extend((name, v) for v in values)
                else:
                    pairs.append((name, values))
        else:
            pairs = list(container.multi_items())
        if self._config.sort_mapping_keys:
            # sorted() is stable, so repeated keys keep their value order.
            pairs.sort(key=lambda pair: str(pair[0]))
        yield from pairs

    def _marshal(self, marshaler: HeaderMarshaler, key: str, lines: list[str]) -> list[str]:
        marshaler_name = type(marshaler).__qualname__
        logger.debug(
            "Delegating %s to %s.encode_header",
            key,
            marshaler_name,
            extra={"header_key": key, "marshaler": marshaler_name},
        )
        result = marshaler.encode_header(key, list(lines))
        if not isinstance(result, list):
            raise MarshalerResultError(marshaler, result)
        return result


_default_encoder = Encoder()


def header_lines(value: Any, *, config: EncoderConfig | None = None) -> list[str]:
    """Encode a record into ``"Key: Value"`` lines.

    Examples:
        >>> from dataclasses import dataclass
        >>> @dataclass
        ... class Req:
        ...     A: list[str]
        >>> header_lines(Req(A=["a", "b"]))
        ['A: a', 'A: b']
        >>> header_lines(None)
        []
    """
    encoder = _default_encoder if config is None else Encoder(config)
    return encoder.encode(value)
