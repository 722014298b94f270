"""Multi-key record sorting.

Sort keys are applied as separate stable passes, in order, so the last key
given dominates and earlier keys only break its ties. To sort by A then B,
pass ``B`` first and ``A`` last (``b:asc,a:desc``).

A record that lacks the key's field always sorts after records that have
it, whichever direction was asked for.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from functools import cmp_to_key
from typing import Iterable

from slowlog.errors import ConfigurationError
from slowlog.models import Record

_EPOCH = datetime(1970, 1, 1)
_MICROSECOND = timedelta(microseconds=1)


@dataclass(frozen=True)
class SortKey:
    field: str
    descending: bool = False


def parse_sort_spec(spec: str) -> list[SortKey]:
    """Parse ``key1:dir1,key2:dir2`` (dir is asc or desc, any case)."""
    keys = []
    for item in spec.split(","):
        parts = item.split(":")
        if len(parts) != 2 or not parts[0].strip():
            raise ConfigurationError(
                f"invalid sort rule {item!r}: should be key:asc or key:desc"
            )
        name, direction = parts[0].strip(), parts[1].strip().lower()
        if direction not in ("asc", "desc"):
            raise ConfigurationError(
                f"invalid sort direction {parts[1]!r} for {name}: expected asc or desc"
            )
        keys.append(SortKey(field=name, descending=direction == "desc"))
    return keys


def _nanoseconds(value) -> int:
    if isinstance(value, datetime):
        value = value.replace(tzinfo=None) - _EPOCH
    return value // _MICROSECOND * 1000


def _sortable(value):
    """Map a typed value to (kind, comparable) so kinds never mix."""
    # bool first: it is an int subclass
    if isinstance(value, bool):
        return bool, value
    if isinstance(value, int):
        return int, value
    if isinstance(value, str):
        return str, value
    if isinstance(value, (datetime, timedelta)):
        return type(value), _nanoseconds(value)
    raise TypeError(f"unsortable value: {value!r}")


def compare(a, b, descending: bool = False) -> int:
    """Three-way compare of one field's values from two records.

    None means the field is absent. Absent values go last in both
    directions; direction only flips the order of two present values.
    """
    if a is None and b is None:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1

    kind_a, key_a = _sortable(a)
    kind_b, key_b = _sortable(b)
    if kind_a is not kind_b:
        raise TypeError(f"unexpected comparison: {a!r} vs {b!r}")

    if key_a == key_b:
        return 0
    result = -1 if key_a < key_b else 1
    return -result if descending else result


def sort_records(records: list[Record], keys: Iterable[SortKey]) -> list[Record]:
    """Return *records* reordered by one stable pass per key."""
    ordered = list(records)
    for key in keys:
        ordered.sort(
            key=cmp_to_key(
                lambda x, y, k=key: compare(x.get(k.field), y.get(k.field), k.descending)
            )
        )
    return ordered
