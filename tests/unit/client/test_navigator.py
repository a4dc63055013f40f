# tests/unit/client/test_navigator.py
import asyncio
import unittest

from db_navigator.client.navigator import Navigator
from db_navigator.client.view_state import SortConfig, ViewStatus
from db_navigator.core.exceptions.custom_exceptions import ApiRequestError


def page_data(page, total_count=45, page_size=20):
    return {
        "rows": [{"id": page * 100 + i, "name": f"user{i}"} for i in range(2)],
        "totalCount": total_count,
        "currentPage": page,
        "totalPages": (total_count + page_size - 1) // page_size,
    }


class FakeApi:
    """In-memory stand-in for NavigatorApiClient with per-call gates."""

    def __init__(self):
        self.databases = ["shop", "archive"]
        self.tables = {"shop": ["orders", "users"], "archive": ["orders_2019"]}
        self.results = {}
        self.page_gates = {}
        self.table_gates = {}
        self.calls = []
        self.closed = False

    async def list_databases(self):
        return list(self.databases)

    async def list_tables(self, database):
        gate = self.table_gates.get(database)
        if gate is not None:
            await gate.wait()
        return list(self.tables.get(database, []))

    async def fetch_rows(self, database, table, page, page_size, sort_by=None, sort_direction=None,
                         filters=None):
        self.calls.append({
            "database": database,
            "table": table,
            "page": page,
            "page_size": page_size,
            "sort_by": sort_by,
            "sort_direction": sort_direction,
            "filters": dict(filters or {}),
        })
        gate = self.page_gates.get(page)
        if gate is not None:
            await gate.wait()
        result = self.results.get(page, page_data(page))
        if isinstance(result, Exception):
            raise result
        return result

    async def aclose(self):
        self.closed = True


class NavigatorTestCase(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.api = FakeApi()
        self.navigator = Navigator(self.api, page_size=20, debounce_delay=0.1)
        await self.navigator.mount()

    async def asyncTearDown(self):
        await self.navigator.aclose()


class TestDatabaseSelection(NavigatorTestCase):

    async def test_mount_selects_first_database(self):
        self.assertEqual(self.navigator.databases, ["shop", "archive"])
        self.assertEqual(self.navigator.selected_db, "shop")
        self.assertEqual(self.navigator.tables, ["orders", "users"])
        self.assertFalse(self.navigator.tables_loading)

    async def test_switching_database_closes_table(self):
        await self.navigator.toggle_table("users")

        await self.navigator.select_database("archive")

        self.assertIsNone(self.navigator.view)
        self.assertEqual(self.navigator.tables, ["orders_2019"])

    async def test_superseded_table_list_discarded(self):
        self.api.table_gates["shop"] = asyncio.Event()

        slow = asyncio.create_task(self.navigator.select_database("shop"))
        await asyncio.sleep(0)
        await self.navigator.select_database("archive")
        self.api.table_gates["shop"].set()
        await slow

        self.assertEqual(self.navigator.selected_db, "archive")
        self.assertEqual(self.navigator.tables, ["orders_2019"])

    async def test_mount_with_failing_api(self):
        async def failing():
            raise ApiRequestError("HTTP error! status: 500", status_code=500)

        api = FakeApi()
        api.list_databases = failing
        navigator = Navigator(api)

        await navigator.mount()

        self.assertEqual(navigator.databases, [])
        self.assertIsNone(navigator.selected_db)


class TestTableView(NavigatorTestCase):

    async def test_open_table(self):
        await self.navigator.toggle_table("users")

        view = self.navigator.view
        self.assertEqual(view.status, ViewStatus.LOADED)
        self.assertEqual(view.page, 1)
        self.assertEqual(view.columns, ["id", "name"])
        self.assertEqual(view.total_pages, 3)
        self.assertEqual(self.api.calls[-1]["database"], "shop")
        self.assertEqual(self.api.calls[-1]["page_size"], 20)

    async def test_toggle_closes_and_reopen_resets(self):
        await self.navigator.toggle_table("users")
        await self.navigator.sort_by("name")
        await self.navigator.change_page(2)
        self.navigator.view.filters["name"] = "al"

        await self.navigator.toggle_table("users")
        self.assertIsNone(self.navigator.view)

        await self.navigator.toggle_table("users")
        view = self.navigator.view
        self.assertEqual(view.page, 1)
        self.assertIsNone(view.sort)
        self.assertEqual(view.filters, {})
        self.assertEqual(self.api.calls[-1]["filters"], {})

    async def test_opening_another_table_replaces_view(self):
        await self.navigator.toggle_table("users")
        await self.navigator.toggle_table("orders")

        self.assertEqual(self.navigator.open_table, "orders")
        self.assertEqual(self.navigator.view.page, 1)

    async def test_sort_toggle_keeps_page(self):
        await self.navigator.toggle_table("users")
        await self.navigator.change_page(2)

        await self.navigator.sort_by("name")
        await self.navigator.sort_by("name")
        await self.navigator.sort_by("age")

        self.assertEqual(self.navigator.view.sort, SortConfig("age", "asc"))
        sorts = [(call["sort_by"], call["sort_direction"], call["page"]) for call in self.api.calls[-3:]]
        self.assertEqual(sorts, [("name", "asc", 2), ("name", "desc", 2), ("age", "asc", 2)])

    async def test_page_bounds(self):
        await self.navigator.toggle_table("users")
        calls = len(self.api.calls)

        await self.navigator.change_page(0)
        await self.navigator.change_page(4)
        self.assertEqual(len(self.api.calls), calls)

        await self.navigator.change_page(3)
        self.assertEqual(self.navigator.view.page, 3)
        self.assertEqual(self.api.calls[-1]["page"], 3)

    async def test_error_state(self):
        self.api.results[1] = ApiRequestError("HTTP error! status: 500 - Database error", status_code=500)

        await self.navigator.toggle_table("users")

        view = self.navigator.view
        self.assertEqual(view.status, ViewStatus.ERROR)
        self.assertFalse(view.loading)
        self.assertEqual(view.rows, [])
        self.assertEqual(view.total_count, 0)
        self.assertIn("500", view.error)

    async def test_empty_result_keeps_header(self):
        await self.navigator.toggle_table("users")
        self.api.results[1] = {"rows": [], "totalCount": 0, "currentPage": 1, "totalPages": 0}

        task = self.navigator.change_filter("name", "zzz")
        await task

        view = self.navigator.view
        self.assertEqual(view.status, ViewStatus.LOADED)
        self.assertEqual(view.rows, [])
        self.assertEqual(view.columns, ["id", "name"])
        self.assertEqual(view.total_pages, 0)


class TestFilterDebounce(NavigatorTestCase):

    async def test_burst_of_keystrokes_fetches_once(self):
        await self.navigator.toggle_table("users")
        await self.navigator.change_page(3)
        calls = len(self.api.calls)

        first = self.navigator.change_filter("name", "a")
        await asyncio.sleep(0.01)
        second = self.navigator.change_filter("name", "al")
        await asyncio.sleep(0.01)
        last = self.navigator.change_filter("name", "ali")
        await last

        self.assertTrue(first.cancelled())
        self.assertTrue(second.cancelled())
        self.assertEqual(len(self.api.calls), calls + 1)
        call = self.api.calls[-1]
        self.assertEqual(call["page"], 1)
        self.assertEqual(call["filters"], {"name": "ali"})
        self.assertEqual(self.navigator.view.page, 1)

    async def test_no_fetch_before_delay(self):
        await self.navigator.toggle_table("users")
        calls = len(self.api.calls)

        task = self.navigator.change_filter("name", "al")
        await asyncio.sleep(0.02)
        self.assertEqual(len(self.api.calls), calls)

        await task
        self.assertEqual(len(self.api.calls), calls + 1)

    async def test_cleared_filter_not_sent(self):
        await self.navigator.toggle_table("users")

        await self.navigator.change_filter("name", "   ")

        self.assertEqual(self.api.calls[-1]["filters"], {})

    async def test_closing_table_cancels_pending_fetch(self):
        await self.navigator.toggle_table("users")
        calls = len(self.api.calls)

        task = self.navigator.change_filter("name", "al")
        await self.navigator.toggle_table("users")
        await asyncio.sleep(0.15)

        self.assertTrue(task.cancelled())
        self.assertEqual(len(self.api.calls), calls)

    async def test_filter_without_open_table(self):
        self.assertIsNone(self.navigator.change_filter("name", "al"))


class TestStaleResponses(NavigatorTestCase):

    async def test_slow_response_discarded(self):
        await self.navigator.toggle_table("users")
        self.api.page_gates[2] = asyncio.Event()

        slow = asyncio.create_task(self.navigator.change_page(2))
        await asyncio.sleep(0)
        await self.navigator.change_page(3)

        self.assertEqual(self.navigator.view.rows, page_data(3)["rows"])

        self.api.page_gates[2].set()
        await slow

        view = self.navigator.view
        self.assertEqual(view.page, 3)
        self.assertEqual(view.rows, page_data(3)["rows"])
        self.assertEqual(view.status, ViewStatus.LOADED)

    async def test_stale_error_discarded(self):
        await self.navigator.toggle_table("users")
        self.api.page_gates[2] = asyncio.Event()
        self.api.results[2] = ApiRequestError("HTTP error! status: 500", status_code=500)

        slow = asyncio.create_task(self.navigator.change_page(2))
        await asyncio.sleep(0)
        await self.navigator.change_page(3)
        self.api.page_gates[2].set()
        await slow

        self.assertEqual(self.navigator.view.status, ViewStatus.LOADED)
        self.assertIsNone(self.navigator.view.error)

    async def test_response_for_closed_table_discarded(self):
        self.api.page_gates[1] = asyncio.Event()

        opening = asyncio.create_task(self.navigator.toggle_table("users"))
        await asyncio.sleep(0)
        await self.navigator.toggle_table("users")
        self.api.page_gates[1].set()
        await opening

        self.assertIsNone(self.navigator.view)


class TestShutdown(unittest.IsolatedAsyncioTestCase):

    async def test_aclose(self):
        api = FakeApi()
        navigator = Navigator(api, debounce_delay=0.1)
        await navigator.mount()
        await navigator.toggle_table("users")
        task = navigator.change_filter("name", "al")

        await navigator.aclose()
        await asyncio.sleep(0)

        self.assertTrue(api.closed)
        self.assertTrue(task.cancelled())
        self.assertIsNone(navigator.view)


if __name__ == "__main__":
    unittest.main()
