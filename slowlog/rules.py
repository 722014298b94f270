"""Field rule table: field name to value kind, plus one compiled regex per field.

Slow-log comment lines look like:

    # Time: 230101 10:00:00.000000
    # Query_time: 1.500000  Lock_time: 0.000000 Rows_sent: 5  Rows_examined: 5

Each field gets a pattern of the form ``^# .*<Field>: (<value>)`` where the
value sub-pattern depends on the field's kind. The table is built once and
never mutated; pass a reduced table to the assembler in tests.
"""

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping

from slowlog.errors import ConfigurationError


class FieldKind(Enum):
    STRING = "string"
    INT = "int"
    BOOL = "bool"
    DURATION = "time"
    TIMESTAMP = "datetime"


# Capture sub-pattern per kind. Timestamps take the rest of the line; the
# coercer does the real validation.
_VALUE_PATTERNS = {
    FieldKind.TIMESTAMP: r".*",
    FieldKind.STRING: r"\w+",
    FieldKind.DURATION: r"[0-9.]+",
    FieldKind.INT: r"\d+",
    FieldKind.BOOL: r"\w+",
}

DEFAULT_RULES = {
    "Time": FieldKind.TIMESTAMP,
    "Schema": FieldKind.STRING,
    "Query_time": FieldKind.DURATION,
    "Lock_time": FieldKind.DURATION,
    "Rows_sent": FieldKind.INT,
    "Rows_examined": FieldKind.INT,
    "Rows_affected": FieldKind.INT,
    "Rows_read": FieldKind.INT,
    "Bytes_sent": FieldKind.INT,
    "Tmp_tables": FieldKind.INT,
    "Tmp_disk_tables": FieldKind.INT,
    "Tmp_table_sizes": FieldKind.INT,
    "QC_Hit": FieldKind.BOOL,
    "Full_scan": FieldKind.BOOL,
    "Full_join": FieldKind.BOOL,
    "Tmp_table": FieldKind.BOOL,
    "Tmp_table_on_disk": FieldKind.BOOL,
    "Filesort": FieldKind.BOOL,
    "Filesort_on_disk": FieldKind.BOOL,
    "Merge_passes": FieldKind.INT,
    "InnoDB_IO_r_ops": FieldKind.INT,
    "InnoDB_IO_r_bytes": FieldKind.INT,
    "InnoDB_IO_r_wait": FieldKind.DURATION,
    "InnoDB_rec_lock_wait": FieldKind.DURATION,
    "InnoDB_queue_wait": FieldKind.DURATION,
    "InnoDB_pages_distinct": FieldKind.INT,
}


@dataclass(frozen=True)
class Rule:
    field: str
    kind: FieldKind
    pattern: re.Pattern

    @property
    def key(self) -> str:
        """Record key the value is stored under."""
        return self.field.lower()


def parse_kind(value) -> FieldKind:
    """Resolve a kind given as a FieldKind, its value ("int") or its name ("INT")."""
    if isinstance(value, FieldKind):
        return value
    text = str(value).strip()
    try:
        return FieldKind(text.lower())
    except ValueError:
        pass
    try:
        return FieldKind[text.upper()]
    except KeyError:
        raise ConfigurationError(f"unknown rule kind: {value!r}") from None


def compile_rule(field: str, kind: FieldKind) -> Rule:
    data = _VALUE_PATTERNS.get(kind)
    if data is None:
        raise ConfigurationError(f"unknown rule kind: {kind!r}")
    pattern = re.compile(r"^# .*" + re.escape(field) + r": (" + data + r")")
    return Rule(field=field, kind=kind, pattern=pattern)


class RuleTable:
    """Immutable field-name -> Rule registry with compiled patterns."""

    def __init__(self, rules: Mapping[str, object]):
        compiled = {}
        for field, kind in rules.items():
            compiled[field] = compile_rule(field, parse_kind(kind))
        self._rules = MappingProxyType(compiled)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, field: str) -> bool:
        return field in self._rules

    def __getitem__(self, field: str) -> Rule:
        return self._rules[field]

    def extended(self, extra: Mapping[str, object]) -> "RuleTable":
        """Return a new table with *extra* rules added (or overriding)."""
        merged = {field: rule.kind for field, rule in self._rules.items()}
        merged.update(extra)
        return RuleTable(merged)

    def match(self, line: str, field: str) -> str | None:
        """Raw capture for *field* on *line*, or None when the line does not carry it."""
        return match_rule(self._rules[field], line)


def match_rule(rule: Rule, line: str) -> str | None:
    """Return the raw captured value if *line* carries *rule*'s field, else None."""
    m = rule.pattern.search(line)
    if not m:
        return None
    return m.group(1)


def default_rule_table() -> RuleTable:
    return _DEFAULT_TABLE


_DEFAULT_TABLE = RuleTable(DEFAULT_RULES)
