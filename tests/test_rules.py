"""Tests for slowlog/rules.py"""

import unittest

from slowlog.errors import ConfigurationError
from slowlog.rules import (
    DEFAULT_RULES,
    FieldKind,
    RuleTable,
    compile_rule,
    default_rule_table,
    match_rule,
    parse_kind,
)

QUERY_LINE = "# Query_time: 1.500000  Lock_time: 0.000000 Rows_sent: 5  Rows_examined: 5"


class TestDefaultTable(unittest.TestCase):
    def test_has_all_fields(self):
        table = default_rule_table()
        self.assertEqual(len(table), len(DEFAULT_RULES))
        for field in DEFAULT_RULES:
            self.assertIn(field, table)

    def test_kinds(self):
        table = default_rule_table()
        self.assertEqual(table["Time"].kind, FieldKind.TIMESTAMP)
        self.assertEqual(table["Query_time"].kind, FieldKind.DURATION)
        self.assertEqual(table["Rows_sent"].kind, FieldKind.INT)
        self.assertEqual(table["QC_Hit"].kind, FieldKind.BOOL)
        self.assertEqual(table["Schema"].kind, FieldKind.STRING)

    def test_record_key_is_lowercase(self):
        self.assertEqual(default_rule_table()["InnoDB_IO_r_ops"].key, "innodb_io_r_ops")

    def test_table_is_read_only(self):
        table = default_rule_table()
        with self.assertRaises(TypeError):
            table._rules["Extra"] = compile_rule("Extra", FieldKind.INT)


class TestMatch(unittest.TestCase):
    """Verify per-field captures on typical comment lines."""

    def setUp(self):
        self.table = default_rule_table()

    def test_duration_capture(self):
        self.assertEqual(self.table.match(QUERY_LINE, "Query_time"), "1.500000")
        self.assertEqual(self.table.match(QUERY_LINE, "Lock_time"), "0.000000")

    def test_int_capture(self):
        self.assertEqual(self.table.match(QUERY_LINE, "Rows_sent"), "5")
        self.assertEqual(self.table.match(QUERY_LINE, "Rows_examined"), "5")

    def test_timestamp_takes_rest_of_line(self):
        line = "# Time: 230101 10:00:00.000000"
        self.assertEqual(self.table.match(line, "Time"), "230101 10:00:00.000000")

    def test_time_does_not_match_query_time(self):
        self.assertIsNone(self.table.match(QUERY_LINE, "Time"))

    def test_string_capture(self):
        line = "# Thread_id: 11  Schema: shop  QC_hit: No"
        self.assertEqual(self.table.match(line, "Schema"), "shop")

    def test_bool_capture(self):
        line = "# Full_scan: Yes  Full_join: No  Tmp_table: No  Tmp_table_on_disk: Yes"
        self.assertEqual(self.table.match(line, "Full_scan"), "Yes")
        self.assertEqual(self.table.match(line, "Tmp_table"), "No")
        self.assertEqual(self.table.match(line, "Tmp_table_on_disk"), "Yes")

    def test_requires_comment_prefix(self):
        self.assertIsNone(self.table.match("Rows_sent: 5", "Rows_sent"))

    def test_int_needs_digits(self):
        self.assertIsNone(self.table.match("# Rows_sent: abc", "Rows_sent"))

    def test_field_name_is_case_sensitive(self):
        self.assertIsNone(self.table.match("# qc_hit: Yes", "QC_Hit"))

    def test_duration_capture_keeps_malformed_number(self):
        rule = self.table["Query_time"]
        self.assertEqual(match_rule(rule, "# Query_time: 1.2.3"), "1.2.3")


class TestKinds(unittest.TestCase):
    def test_parse_kind_by_value(self):
        self.assertEqual(parse_kind("int"), FieldKind.INT)
        self.assertEqual(parse_kind("time"), FieldKind.DURATION)
        self.assertEqual(parse_kind("datetime"), FieldKind.TIMESTAMP)

    def test_parse_kind_by_name(self):
        self.assertEqual(parse_kind("Duration"), FieldKind.DURATION)
        self.assertEqual(parse_kind(FieldKind.BOOL), FieldKind.BOOL)

    def test_unknown_kind_is_configuration_error(self):
        with self.assertRaises(ConfigurationError):
            parse_kind("float")

    def test_table_with_unknown_kind_fails_to_build(self):
        with self.assertRaises(ConfigurationError):
            RuleTable({"Rows_sent": "int", "Weird": "complex"})

    def test_compile_rule_rejects_non_kind(self):
        with self.assertRaises(ConfigurationError):
            compile_rule("Weird", "int")


class TestExtended(unittest.TestCase):
    def test_adds_rule_without_touching_original(self):
        base = RuleTable({"Time": "datetime"})
        bigger = base.extended({"Thread_id": "int"})
        self.assertIn("Thread_id", bigger)
        self.assertIn("Time", bigger)
        self.assertNotIn("Thread_id", base)
        self.assertEqual(bigger.match("# Thread_id: 42  Schema: x", "Thread_id"), "42")


if __name__ == "__main__":
    unittest.main()
