"""Tests for slowlog/formatter.py"""

import json
import unittest
from datetime import datetime, timedelta

from slowlog.formatter import format_json, format_ndjson, get_formatter


def _record(**overrides):
    record = {
        "time": datetime(2023, 1, 1, 10, 0, 0),
        "query_time": timedelta(seconds=1.5),
        "time_start": datetime(2023, 1, 1, 9, 59, 58, 500000),
        "rows_sent": 5,
        "full_scan": True,
        "query": "SELECT 1;",
        "query_length": 9,
    }
    record.update(overrides)
    return record


class TestFormatJson(unittest.TestCase):
    def test_valid_json_array(self):
        parsed = json.loads(format_json([_record(), _record(rows_sent=6)]))
        self.assertEqual(len(parsed), 2)
        self.assertEqual(parsed[1]["rows_sent"], 6)

    def test_values_normalized(self):
        parsed = json.loads(format_json([_record()]))[0]
        self.assertEqual(parsed["time"], "2023-01-01 10:00:00.00000000")
        self.assertEqual(parsed["time_start"], "2023-01-01 09:59:58.50000000")
        self.assertEqual(parsed["query_time"], 1.5)
        self.assertIs(parsed["full_scan"], True)

    def test_four_space_indent(self):
        text = format_json([_record()])
        self.assertIn('\n        "rows_sent": 5', text)

    def test_empty(self):
        self.assertEqual(json.loads(format_json([])), [])

    def test_non_ascii_kept(self):
        self.assertIn("wörld", format_json([_record(query="SELECT 'wörld'")]))


class TestFormatNdjson(unittest.TestCase):
    def test_one_object_per_line(self):
        lines = format_ndjson([_record(), _record()]).split("\n")
        self.assertEqual(len(lines), 2)
        for line in lines:
            self.assertEqual(json.loads(line)["query_length"], 9)


class TestGetFormatter(unittest.TestCase):
    def test_default_json(self):
        self.assertIs(get_formatter(), format_json)

    def test_ndjson(self):
        self.assertIs(get_formatter("ndjson"), format_ndjson)


if __name__ == "__main__":
    unittest.main()
