"""Derived fields, the admission filter, and display normalization."""

import logging
from datetime import datetime, timedelta

from slowlog.models import Record

logger = logging.getLogger(__name__)

# Go-style "2006-01-02 15:04:05.00000000": eight fractional digits.
DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S.%f00"


def finalize(record: Record) -> tuple[Record, bool]:
    """Add time_start and query_length; keep only records with a parsed time.

    time_start = time - query_time, when both parsed and the result is a
    representable date.
    query_length = len(query), when a body was collected.
    """
    end = record.get("time")
    if not isinstance(end, datetime):
        return record, False

    query_time = record.get("query_time")
    if isinstance(query_time, timedelta):
        try:
            record["time_start"] = end - query_time
        except OverflowError:
            logger.warning("query_time %s reaches before year 1, no time_start for %s", query_time, end)

    query = record.get("query")
    if isinstance(query, str):
        record["query_length"] = len(query)

    return record, True


def format_timestamp(value: datetime) -> str:
    return value.strftime(DISPLAY_FORMAT)


def normalize(record: Record) -> dict:
    """Return a JSON-ready copy: datetimes as strings, timedeltas as float seconds.

    The typed record is left untouched so it can still be sorted.
    """
    out = {}
    for key, value in record.items():
        if isinstance(value, datetime):
            out[key] = format_timestamp(value)
        elif isinstance(value, timedelta):
            out[key] = value.total_seconds()
        else:
            out[key] = value
    return out
