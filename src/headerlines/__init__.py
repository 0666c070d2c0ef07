"""headerlines — encode records as ordered ``Key: Value`` header lines."""

from headerlines.config.models import EncoderConfig
from headerlines.domain.errors import (
    ConfigError,
    HeaderLinesError,
    InvalidFieldTypeError,
    InvalidInputShapeError,
    MarshalerResultError,
)
from headerlines.domain.fields import Embedded, embedded_field, header, header_field
from headerlines.domain.marshal import HeaderMarshaler
from headerlines.encoder import Encoder, header_lines

__all__ = [
    "ConfigError",
    "Embedded",
    "Encoder",
    "EncoderConfig",
    "HeaderLinesError",
    "HeaderMarshaler",
    "InvalidFieldTypeError",
    "InvalidInputShapeError",
    "MarshalerResultError",
    "embedded_field",
    "header",
    "header_field",
    "header_lines",
]
