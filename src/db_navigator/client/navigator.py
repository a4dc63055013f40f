# src/db_navigator/client/navigator.py
import asyncio
import itertools
import logging
from typing import List, Optional

from db_navigator.client.api_client import NavigatorApiClient
from db_navigator.client.view_state import TableView, ViewStatus, next_sort
from db_navigator.core.exceptions.custom_exceptions import ApiRequestError

logger = logging.getLogger(__name__)

ROWS_PER_PAGE = 20
DEBOUNCE_DELAY = 0.3  # seconds


class Navigator:
    """
    Client-side state for browsing databases, tables and table rows.

    Runs on a single asyncio event loop. Fetches may overlap: every fetch
    takes a token from an increasing counter, and a response is applied
    only while its token is still the latest one issued for the open view.
    Superseded responses are dropped without touching visible state.
    """

    def __init__(self, api: NavigatorApiClient, page_size: int = ROWS_PER_PAGE,
                 debounce_delay: float = DEBOUNCE_DELAY):
        """
        Initialize the navigator.

        Args:
            api: View API client
            page_size: Rows per page requested from the server
            debounce_delay: Quiet period after a filter keystroke before fetching
        """
        self.api = api
        self.page_size = page_size
        self.debounce_delay = debounce_delay

        self.databases: List[str] = []
        self.selected_db: Optional[str] = None
        self.tables: List[str] = []
        self.tables_loading = False
        self.view: Optional[TableView] = None

        self._tokens = itertools.count(1)
        self._tables_token = 0
        self._debounce_task: Optional[asyncio.Task] = None

    @property
    def open_table(self) -> Optional[str]:
        return self.view.table if self.view else None

    async def mount(self) -> None:
        """Load the database list and select the first database."""
        try:
            self.databases = await self.api.list_databases()
        except ApiRequestError as e:
            logger.error(f"Error fetching databases: {e}")
            self.databases = []
            return

        if self.databases:
            await self.select_database(self.databases[0])

    async def select_database(self, database: str) -> None:
        """
        Switch to another database and load its tables.

        The open table belongs to the previous database and is closed.
        """
        self.selected_db = database
        self._close_view()

        token = self._tables_token = next(self._tokens)
        self.tables_loading = True
        try:
            tables = await self.api.list_tables(database)
        except ApiRequestError as e:
            logger.error(f"Error fetching table names: {e}")
            tables = []

        if token != self._tables_token:
            logger.debug(f"Discarding table list for superseded selection {database}")
            return
        self.tables = tables
        self.tables_loading = False

    async def toggle_table(self, table: str) -> None:
        """Open a table on page 1, or close it when it is already open."""
        if self.open_table == table:
            self._close_view()
            return

        self._close_view()
        self.view = TableView(table=table)
        await self._fetch()

    async def sort_by(self, column: str) -> None:
        """Sort on a column header click and reload the current page."""
        if self.view is None:
            return
        self.view.sort = next_sort(self.view.sort, column)
        await self._fetch()

    def change_filter(self, column: str, value: str) -> Optional[asyncio.Task]:
        """
        Record a filter keystroke and (re)schedule the debounced fetch.

        Must be called from within the event loop. Any fetch still waiting
        out its delay is cancelled; a fetch already under way is left to
        complete and is superseded by the newer token.

        Returns:
            The scheduled task, or None when no table is open.
        """
        if self.view is None:
            return None

        self.view.filters[column] = value
        self._cancel_debounce()
        self._debounce_task = asyncio.get_running_loop().create_task(self._debounced_fetch(self.view))
        return self._debounce_task

    async def change_page(self, page: int) -> None:
        """Load another page; pages outside the known range are ignored."""
        if self.view is None or page < 1:
            return
        if self.view.total_pages and page > self.view.total_pages:
            return
        self.view.page = page
        await self._fetch()

    async def aclose(self) -> None:
        self._close_view()
        await self.api.aclose()

    async def _debounced_fetch(self, view: TableView) -> None:
        await asyncio.sleep(self.debounce_delay)
        # Past the delay the fetch is committed and must not be cancelled
        self._debounce_task = None
        if self.view is not view:
            return
        view.page = 1
        await self._fetch()

    async def _fetch(self) -> None:
        view = self.view
        if view is None:
            return

        token = view.request_token = next(self._tokens)
        view.status = ViewStatus.LOADING
        sort = view.sort

        try:
            data = await self.api.fetch_rows(
                self.selected_db,
                view.table,
                view.page,
                self.page_size,
                sort_by=sort.column if sort else None,
                sort_direction=sort.direction if sort else None,
                filters=view.active_filters()
            )
        except ApiRequestError as e:
            if self._is_current(view, token):
                logger.error(f"Error fetching table data: {e}")
                view.apply_error(str(e))
            return

        if not self._is_current(view, token):
            logger.debug(f"Discarding stale response {token} for {view.table}")
            return
        view.apply_result(data)

    def _is_current(self, view: TableView, token: int) -> bool:
        return self.view is view and view.request_token == token

    def _cancel_debounce(self) -> None:
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = None

    def _close_view(self) -> None:
        self._cancel_debounce()
        self.view = None
