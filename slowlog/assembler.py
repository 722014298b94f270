"""Record assembler: folds slow-log lines into typed records.

A block starts at a ``# Time: `` line and runs until the next one. Comment
lines (``# ...``) are matched against every rule; anything else is query
text and is appended to the record's ``query`` value.
"""

import logging
from typing import Iterable

from slowlog.coerce import coerce
from slowlog.errors import FieldCoercionError
from slowlog.models import ParseResult, Record
from slowlog.postprocess import finalize
from slowlog.rules import RuleTable, default_rule_table, match_rule

logger = logging.getLogger(__name__)

TIME_MARKER = "# Time: "
COMMENT_PREFIX = "# "


class RecordAssembler:
    def __init__(self, rules: RuleTable | None = None, query_separator: str = "\n"):
        self._rules = rules if rules is not None else default_rule_table()
        self._separator = query_separator
        self._record: Record = {}
        self._records: list[Record] = []
        self._warnings: list[FieldCoercionError] = []
        self._dropped = 0

    @property
    def dropped(self) -> int:
        """Blocks discarded because they had no parseable time."""
        return self._dropped

    def feed(self, line: str) -> None:
        """Consume one complete input line."""
        line = line.rstrip("\r\n")

        if line.startswith(TIME_MARKER):
            self._flush()

        if not line.startswith(COMMENT_PREFIX):
            self._append_query(line)
            return

        for rule in self._rules:
            raw = match_rule(rule, line)
            if raw is None:
                continue
            try:
                self._record[rule.key] = coerce(raw, rule.field, rule.kind)
            except FieldCoercionError as e:
                self._warnings.append(e)

    def close(self) -> ParseResult:
        """Flush the last block and return everything collected."""
        self._flush()
        logger.debug(
            "Assembled %d records (%d dropped, %d field warnings)",
            len(self._records), self._dropped, len(self._warnings),
        )
        return ParseResult(records=self._records, warnings=self._warnings)

    def _append_query(self, line: str) -> None:
        query = self._record.get("query")
        if query is None:
            self._record["query"] = line
        else:
            self._record["query"] = query + self._separator + line

    def _flush(self) -> None:
        if not self._record:
            return
        record, keep = finalize(self._record)
        if keep:
            self._records.append(record)
        else:
            self._dropped += 1
        self._record = {}


def ingest(
    lines: Iterable[str],
    rules: RuleTable | None = None,
    query_separator: str = "\n",
) -> ParseResult:
    """Assemble every record from *lines* (complete lines, newline optional)."""
    assembler = RecordAssembler(rules, query_separator)
    for line in lines:
        assembler.feed(line)
    return assembler.close()
