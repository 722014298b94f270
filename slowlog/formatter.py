"""Output formatters: indented JSON array, NDJSON."""

import json
from typing import Callable

from slowlog.models import Record
from slowlog.postprocess import normalize

FORMATS = ("json", "ndjson")


def format_json(records: list[Record], indent: int = 4) -> str:
    """Return all records as one indented JSON array."""
    return json.dumps([normalize(r) for r in records], indent=indent, ensure_ascii=False)


def format_ndjson(records: list[Record], indent: int = 4) -> str:
    """Return NDJSON, one JSON object per line, compatible with jq."""
    return "\n".join(json.dumps(normalize(r), ensure_ascii=False) for r in records)


def get_formatter(output_format: str = "json") -> Callable[[list[Record], int], str]:
    """Factory that returns the right formatter for *output_format*."""
    if output_format == "ndjson":
        return format_ndjson
    return format_json
