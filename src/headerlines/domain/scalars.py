"""Scalar formatting and per-type zero values.

Wire timestamps use the RFC 1123 layout with a literal ``GMT`` zone,
e.g. ``Sat, 01 Jan 2000 12:34:56 GMT``.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_EPOCH_ORDINAL = date(1970, 1, 1).toordinal()
_SECONDS_PER_DAY = 86400


def format_bool(value: bool, *, as_int: bool = False) -> str:
    if as_int:
        return "1" if value else "0"
    return "true" if value else "false"


def format_number(value: int | float | Decimal) -> str:
    """Render a number in base 10.

    Integral floats drop the fractional part (``0.0`` -> ``"0"``); other
    floats use the shortest round-trip form.
    """
    if isinstance(value, bool):
        return format_bool(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Decimal):
        if value.is_nan():
            return "NaN"
        if value.is_infinite():
            return "+Inf" if value > 0 else "-Inf"
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def _utc_parts(value: datetime | date) -> tuple[int, int]:
    """Return (days since 0001-01-01, seconds into that day) in UTC."""
    if not isinstance(value, datetime):
        return value.toordinal(), 0
    offset = value.utcoffset() or timedelta(0)
    seconds = value.hour * 3600 + value.minute * 60 + value.second
    seconds -= int(offset.total_seconds())
    day_shift, seconds = divmod(seconds, _SECONDS_PER_DAY)
    return value.toordinal() + day_shift, seconds


def format_time(value: datetime | date, *, unix: bool = False) -> str:
    """Render a wire timestamp, or epoch seconds when *unix* is set.

    Naive datetimes and plain dates are taken as UTC.
    """
    ordinal, seconds = _utc_parts(value)
    if unix:
        return str((ordinal - _EPOCH_ORDINAL) * _SECONDS_PER_DAY + seconds)
    # Offsets can push the first/last day of the calendar out of range.
    ordinal = min(max(ordinal, date.min.toordinal()), date.max.toordinal())
    day = date.fromordinal(ordinal)
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    return (
        f"{_WEEKDAYS[day.weekday()]}, {day.day:02d} {_MONTHS[day.month - 1]} {day.year:04d} "
        f"{hours:02d}:{minutes:02d}:{secs:02d} GMT"
    )


def format_scalar(value: Any, *, as_int: bool = False, unix: bool = False) -> str:
    """Render a single non-collection value."""
    if isinstance(value, Enum):
        return format_scalar(value.value, as_int=as_int, unix=unix)
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        # Header octets map one to one onto latin-1 code points.
        return bytes(value).decode("latin-1")
    if isinstance(value, bool):
        return format_bool(value, as_int=as_int)
    if isinstance(value, (int, float, Decimal)):
        return format_number(value)
    if isinstance(value, (datetime, date)):
        return format_time(value, unix=unix)
    if isinstance(value, time):
        return value.isoformat()
    return str(value)


def is_zero_time(value: datetime | date) -> bool:
    """True for the zero instant, 0001-01-01 00:00:00 UTC."""
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) == datetime.min and not value.utcoffset()
    return value == date.min


def is_empty(value: Any) -> bool:
    """Whether *value* counts as empty for the ``omitempty`` option."""
    if value is None:
        return True
    if isinstance(value, Enum):
        return is_empty(value.value)
    if isinstance(value, (str, bytes, bytearray, list, tuple, Mapping)):
        return len(value) == 0
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float, Decimal)):
        return value == 0
    if isinstance(value, (datetime, date)):
        return is_zero_time(value)
    return False
