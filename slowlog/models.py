"""Record and parse-result types shared across the pipeline."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from slowlog.errors import FieldCoercionError

# Typed values a record holds before normalization. The rule table pins each
# field to exactly one of these.
Value = str | int | bool | timedelta | datetime

# Lower-cased field name -> typed value. Also "query", and after finalize
# "time_start" and "query_length".
Record = dict[str, Value]


@dataclass
class ParseResult:
    records: list[Record] = field(default_factory=list)
    warnings: list[FieldCoercionError] = field(default_factory=list)
