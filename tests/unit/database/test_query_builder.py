# tests/unit/database/test_query_builder.py
import unittest

from db_navigator.core.exceptions.custom_exceptions import InvalidIdentifierError, InvalidRequestError
from db_navigator.database.query_builder import (
    SortSpec,
    ViewRequest,
    build_statements,
    escape_like,
    list_databases_statement,
    list_tables_statement,
    normalize_direction,
    validate_identifier
)

NAME_MATCH = "LOWER(name) LIKE LOWER(?) ESCAPE '!'"
CITY_MATCH = "LOWER(city) LIKE LOWER(?) ESCAPE '!'"


class TestIdentifierValidation(unittest.TestCase):
    """Test cases for the safe-identifier check."""

    def test_valid_identifiers(self):
        for name in ["users", "User_Accounts", "t1", "_hidden", "2024_sales"]:
            self.assertEqual(validate_identifier(name), name)

    def test_invalid_identifiers(self):
        invalid = [
            "",
            "users;",
            "users; DROP TABLE users",
            "name--",
            "first name",
            "a.b",
            "`users`",
            "naïve",
            "users\n",
            None,
            42,
        ]
        for name in invalid:
            with self.assertRaises(InvalidIdentifierError, msg=f"Should reject {name!r}"):
                validate_identifier(name)

    def test_error_names_kind(self):
        with self.assertRaises(InvalidIdentifierError) as context:
            validate_identifier("bad name", "column")
        self.assertEqual(context.exception.identifier, "bad name")
        self.assertIn("column", str(context.exception))


class TestViewRequest(unittest.TestCase):
    """Test cases for ViewRequest construction."""

    def test_blank_filters_dropped(self):
        request = ViewRequest("users", filters={"name": "al", "email": "  ", "city": ""})
        self.assertEqual(request.filters, {"name": "al"})

    def test_page_must_be_positive(self):
        with self.assertRaises(InvalidRequestError):
            ViewRequest("users", page=0)
        with self.assertRaises(InvalidRequestError):
            ViewRequest("users", page_size=0)
        with self.assertRaises(InvalidRequestError):
            ViewRequest("users", page="2")

    def test_offset(self):
        self.assertEqual(ViewRequest("users", page=1, page_size=20).offset, 0)
        self.assertEqual(ViewRequest("users", page=3, page_size=20).offset, 40)

    def test_direction_normalization(self):
        self.assertEqual(normalize_direction("desc"), "DESC")
        self.assertEqual(normalize_direction("DESC"), "DESC")
        self.assertEqual(normalize_direction("asc"), "ASC")
        self.assertEqual(normalize_direction("sideways"), "ASC")
        self.assertEqual(normalize_direction(None), "ASC")
        self.assertEqual(SortSpec("age", "descending").direction, "ASC")


class TestBuildStatements(unittest.TestCase):
    """Test cases for count/data statement construction."""

    def test_no_filters_no_sort(self):
        count, data = build_statements(ViewRequest("users", page=1, page_size=20))

        self.assertEqual(count.text, "SELECT COUNT(*) AS total FROM users")
        self.assertEqual(count.params, ())
        self.assertNotIn("WHERE", count.text)
        self.assertEqual(data.text, "SELECT * FROM users LIMIT ? OFFSET ?")
        self.assertEqual(data.params, (20, 0))

    def test_filter_is_bound_not_interpolated(self):
        count, data = build_statements(ViewRequest("users", page=1, page_size=20, filters={"name": "al"}))

        self.assertEqual(data.text, f"SELECT * FROM users WHERE {NAME_MATCH} LIMIT ? OFFSET ?")
        self.assertEqual(data.params, ("%al%", 20, 0))
        self.assertEqual(count.text, f"SELECT COUNT(*) AS total FROM users WHERE {NAME_MATCH}")
        self.assertEqual(count.params, ("%al%",))
        self.assertNotIn("LIMIT", count.text)
        self.assertNotIn("OFFSET", count.text)
        self.assertNotIn("%al%", data.text)

    def test_hostile_filter_value_stays_a_parameter(self):
        value = "x' OR '1'='1"
        count, data = build_statements(ViewRequest("users", filters={"name": value}))

        self.assertNotIn(value, data.text)
        self.assertNotIn(value, count.text)
        self.assertEqual(data.params[0], f"%{value}%")

    def test_wildcards_in_value_are_escaped(self):
        self.assertEqual(escape_like("a_b"), "a!_b")
        self.assertEqual(escape_like("100%"), "100!%")
        self.assertEqual(escape_like("wow!"), "wow!!")
        self.assertEqual(escape_like("plain"), "plain")

        count, _ = build_statements(ViewRequest("users", filters={"name": "a_b", "city": "0%"}))
        self.assertEqual(count.params, ("%a!_b%", "%0!%%"))

    def test_match_ignores_case(self):
        count, _ = build_statements(ViewRequest("users", filters={"name": "AL"}))

        self.assertIn("LOWER(name)", count.text)
        self.assertIn("LOWER(?)", count.text)
        self.assertEqual(count.params, ("%AL%",))

    def test_one_parameter_per_filter_plus_paging(self):
        filters = {"name": "al", "city": "Par", "email": " ", "zip": "75"}
        count, data = build_statements(ViewRequest("users", page=2, page_size=10, filters=filters))

        self.assertEqual(len(count.params), 3)
        self.assertEqual(len(data.params), 3 + 2)
        self.assertEqual(data.params[-2:], (10, 10))
        self.assertIn(f"WHERE {NAME_MATCH} AND {CITY_MATCH} AND LOWER(zip)", data.text)

    def test_count_shares_where_clause(self):
        count, data = build_statements(
            ViewRequest("users", page=4, page_size=5, sort=SortSpec("age", "desc"),
                        filters={"name": "al", "city": "o"})
        )
        where = f"WHERE {NAME_MATCH} AND {CITY_MATCH}"
        self.assertTrue(count.text.endswith(where))
        self.assertIn(where, data.text)
        self.assertEqual(count.params, data.params[:-2])
        self.assertNotIn("ORDER BY", count.text)

    def test_sort(self):
        _, data = build_statements(ViewRequest("users", sort=SortSpec("age", "desc")))
        self.assertEqual(data.text, "SELECT * FROM users ORDER BY age DESC LIMIT ? OFFSET ?")

        _, data = build_statements(ViewRequest("users", sort=SortSpec("age", "whatever")))
        self.assertIn("ORDER BY age ASC", data.text)

    def test_order_by_precedes_limit(self):
        _, data = build_statements(
            ViewRequest("users", sort=SortSpec("age"), filters={"name": "al"})
        )
        self.assertLess(data.text.index("WHERE"), data.text.index("ORDER BY"))
        self.assertLess(data.text.index("ORDER BY"), data.text.index("LIMIT"))

    def test_invalid_identifiers_rejected(self):
        bad_requests = [
            ViewRequest("users; DROP TABLE users"),
            ViewRequest("users", sort=SortSpec("age DESC, (SELECT 1)")),
            ViewRequest("users", filters={"name = name OR 1": "x"}),
        ]
        for request in bad_requests:
            with self.assertRaises(InvalidIdentifierError):
                build_statements(request)

    def test_blank_filter_on_unsafe_column_is_ignored(self):
        # Dropped before validation, so it never reaches statement text
        count, _ = build_statements(ViewRequest("users", filters={"bad column": "  "}))
        self.assertEqual(count.text, "SELECT COUNT(*) AS total FROM users")

    def test_idempotent(self):
        request = ViewRequest("users", page=3, page_size=25, sort=SortSpec("name", "asc"),
                              filters={"city": "Lyon", "name": "al"})
        self.assertEqual(build_statements(request), build_statements(request))


class TestIntrospectionStatements(unittest.TestCase):
    """Test cases for the fixed listing statements."""

    def test_mysql(self):
        self.assertEqual(list_databases_statement("mysql").text, "SHOW DATABASES")
        self.assertEqual(list_tables_statement("mysql").text, "SHOW TABLES")

    def test_unknown_dialect_falls_back_to_mysql(self):
        self.assertEqual(list_tables_statement("bigquery").text, "SHOW TABLES")

    def test_no_parameters(self):
        for dialect in ("mysql", "sqlite", "postgresql"):
            self.assertEqual(list_databases_statement(dialect).params, ())
            self.assertEqual(list_tables_statement(dialect).params, ())


if __name__ == "__main__":
    unittest.main()
