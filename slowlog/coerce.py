"""Raw capture -> typed value, per field kind."""

import re
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation

from slowlog.errors import FieldCoercionError
from slowlog.rules import FieldKind

# 230101 10:00:00.000000 (older servers also write " 9:05:03" with one hour digit)
_LEGACY_TIME_RE = re.compile(
    r"^(?P<date>\d{6})\s+"
    r"(?P<hour>\d{1,2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d+))?$"
)

# 2023-01-01T10:00:00.123456Z, written by MySQL 5.7 and later
_ISO_TIME_RE = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})T"
    r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?:Z|[+-]\d{2}:?\d{2})?$"
)

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1

_BOOLS = {"Yes": True, "No": False}


def _microseconds(fraction: str | None) -> int:
    """'5' -> 500000, '123456789' -> 123456 (truncated)."""
    if not fraction:
        return 0
    return int(fraction[:6].ljust(6, "0"))


def parse_timestamp(raw: str) -> datetime:
    text = raw.strip()

    m = _LEGACY_TIME_RE.match(text)
    if m:
        day = datetime.strptime(m.group("date"), "%y%m%d")
        return day.replace(
            hour=int(m.group("hour")),
            minute=int(m.group("minute")),
            second=int(m.group("second")),
            microsecond=_microseconds(m.group("fraction")),
        )

    m = _ISO_TIME_RE.match(text)
    if m:
        # Offset is dropped: the literal wall-clock value is kept.
        return datetime(
            int(m.group("year")),
            int(m.group("month")),
            int(m.group("day")),
            int(m.group("hour")),
            int(m.group("minute")),
            int(m.group("second")),
            _microseconds(m.group("fraction")),
        )

    raise ValueError("unrecognized timestamp format")


def parse_duration(raw: str) -> timedelta:
    """Decimal seconds ('1.500000') -> timedelta, truncated to microseconds."""
    try:
        seconds = Decimal(raw)
    except InvalidOperation:
        raise ValueError("invalid decimal number") from None
    if not seconds.is_finite():
        raise ValueError("invalid decimal number")
    return timedelta(microseconds=int(seconds.scaleb(6)))


def parse_int(raw: str) -> int:
    value = int(raw, 10)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError("value out of 64-bit range")
    return value


def parse_bool(raw: str) -> bool:
    try:
        return _BOOLS[raw]
    except KeyError:
        raise ValueError("expected Yes or No") from None


_PARSERS = {
    FieldKind.STRING: str,
    FieldKind.INT: parse_int,
    FieldKind.BOOL: parse_bool,
    FieldKind.DURATION: parse_duration,
    FieldKind.TIMESTAMP: parse_timestamp,
}


def coerce(raw: str, field: str, kind: FieldKind):
    """Convert *raw* to the Python type for *kind*.

    Raises FieldCoercionError naming *field* when the text does not parse.
    """
    try:
        return _PARSERS[kind](raw)
    except (ValueError, OverflowError) as e:
        raise FieldCoercionError(field, raw, str(e)) from e
