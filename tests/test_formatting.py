from __future__ import annotations

import datetime as dt
import unittest

from row_sql import (
    MySQLDialect,
    PostgresDialect,
    SQLiteDialect,
    cal_like_to,
    cal_to,
    format_sql,
    object_to_and_query,
    query_key,
)


class FormatSqlTests(unittest.TestCase):
    def test_formats_qmark_placeholders(self) -> None:
        result = format_sql("SELECT * FROM users WHERE id = ? AND name = ?", [1, "John"])
        self.assertEqual(result, "SELECT * FROM users WHERE id = 1 AND name = 'John'")

    def test_empty_parameters_leave_text_unchanged(self) -> None:
        self.assertEqual(format_sql("SELECT * FROM users", []), "SELECT * FROM users")

    def test_format_paramstyle_dialects(self) -> None:
        sql = "SELECT * FROM users WHERE id = %s"
        self.assertEqual(format_sql(sql, [7], MySQLDialect()), "SELECT * FROM users WHERE id = 7")
        self.assertEqual(format_sql(sql, [7], PostgresDialect()), "SELECT * FROM users WHERE id = 7")
        self.assertEqual(
            format_sql("SELECT * FROM t WHERE id = ?", [7], SQLiteDialect()),
            "SELECT * FROM t WHERE id = 7",
        )

    def test_escapes_literals(self) -> None:
        self.assertEqual(format_sql("?", ["O'Brien"]), "'O\\'Brien'")
        self.assertEqual(format_sql("?", [None]), "NULL")
        self.assertEqual(format_sql("id IN ?", [[1, 2]]), "id IN (1,2)")
        self.assertEqual(
            format_sql("?", [dt.datetime(2024, 1, 2, 3, 4, 5)]),
            "'2024-01-02 03:04:05'",
        )

    def test_placeholders_inside_quotes_are_kept(self) -> None:
        result = format_sql("SELECT '?' AS q, `a?` AS b, ? AS v", [5])
        self.assertEqual(result, "SELECT '?' AS q, `a?` AS b, 5 AS v")

    def test_surplus_placeholders_are_kept(self) -> None:
        self.assertEqual(format_sql("? AND ?", [1]), "1 AND ?")

    def test_formatting_is_deterministic(self) -> None:
        args = ("SELECT * FROM t WHERE a = ? AND b = ?", [1, "x"])
        self.assertEqual(format_sql(*args), format_sql(*args))


class QueryKeyTests(unittest.TestCase):
    def test_same_query_and_params_give_same_key(self) -> None:
        key1 = query_key("SELECT * FROM users WHERE id = ?", 1)
        key2 = query_key("SELECT * FROM users WHERE id = ?", 1)
        self.assertEqual(key1, key2)

    def test_different_params_give_different_keys(self) -> None:
        key1 = query_key("SELECT * FROM users WHERE id = ?", 1)
        key2 = query_key("SELECT * FROM users WHERE id = ?", 2)
        self.assertNotEqual(key1, key2)

    def test_different_queries_give_different_keys(self) -> None:
        key1 = query_key("SELECT * FROM users WHERE id = ?", 1)
        key2 = query_key("SELECT * FROM products WHERE id = ?", 1)
        self.assertNotEqual(key1, key2)

    def test_key_hashes_rendered_text(self) -> None:
        self.assertEqual(
            query_key("SELECT * FROM users WHERE id = ?", 1),
            query_key("SELECT * FROM users WHERE id = 1"),
        )

    def test_anagram_statements_do_not_collide(self) -> None:
        self.assertNotEqual(query_key("SELECT ab"), query_key("SELECT ba"))


class OptionalClauseTests(unittest.TestCase):
    def test_cal_to_renders_when_value_present(self) -> None:
        self.assertEqual(cal_to("WHERE id = ?", 1), "WHERE id = 1")

    def test_cal_to_comment_for_missing_values(self) -> None:
        self.assertEqual(cal_to("WHERE id = ?", None), "-- calTo")
        self.assertEqual(cal_to("WHERE id = ?", ""), "-- calTo")
        self.assertEqual(cal_to("WHERE id = ?"), "-- calTo")

    def test_cal_to_keeps_zero(self) -> None:
        self.assertEqual(cal_to("AND level = ?", 0), "AND level = 0")
        self.assertEqual(cal_to("AND active = ?", False), "AND active = 0")

    def test_cal_to_multiple_parameters(self) -> None:
        self.assertEqual(
            cal_to("WHERE id = ? AND name = ?", 1, "John"),
            "WHERE id = 1 AND name = 'John'",
        )

    def test_cal_to_uses_dialect_placeholder(self) -> None:
        self.assertEqual(cal_to("AND id = %s", 3, dialect=MySQLDialect()), "AND id = 3")

    def test_cal_like_to_wraps_values(self) -> None:
        self.assertEqual(cal_like_to("WHERE name LIKE ?", "John"), "WHERE name LIKE '%John%'")
        self.assertEqual(
            cal_like_to("WHERE name LIKE ? AND city LIKE ?", "John", "Seoul"),
            "WHERE name LIKE '%John%' AND city LIKE '%Seoul%'",
        )

    def test_format_paramstyle_fragments_double_percent(self) -> None:
        self.assertEqual(
            cal_like_to("AND name LIKE %s", "jo", dialect=MySQLDialect()),
            "AND name LIKE '%%jo%%'",
        )
        self.assertEqual(cal_to("AND code = %s", "50%", dialect=PostgresDialect()), "AND code = '50%%'")
        self.assertEqual(
            cal_like_to("AND name LIKE ?", "jo", dialect=SQLiteDialect()),
            "AND name LIKE '%jo%'",
        )

    def test_cal_like_to_comment_for_missing_values(self) -> None:
        self.assertEqual(cal_like_to("WHERE name LIKE ?", None), "/* calTo */")
        self.assertEqual(cal_like_to("WHERE name LIKE ?", ""), "/* calTo */")

    def test_object_to_and_query(self) -> None:
        result = object_to_and_query({"id": 1, "name": "John"})
        self.assertEqual(result, "AND id = 1\nAND name = 'John'")

    def test_object_to_and_query_skips_empty_values(self) -> None:
        result = object_to_and_query({"id": 1, "name": None, "age": 25})
        self.assertIn("AND id = 1", result)
        self.assertIn("/* SKIP :: name */", result)
        self.assertIn("AND age = 25", result)

    def test_object_to_and_query_empty(self) -> None:
        self.assertEqual(object_to_and_query({}), "")
