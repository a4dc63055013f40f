# src/db_navigator/database/gateway.py
import logging
import time
from typing import Dict, Any, List, Optional

from db_navigator.core.exceptions.custom_exceptions import InvalidRequestError, NoDataError
from db_navigator.core.interfaces.backend_interface import BackendStrategy
from db_navigator.database.error_handler import DatabaseErrorHandler
from db_navigator.database.query_builder import (
    BuiltStatement,
    ViewRequest,
    build_statements,
    list_databases_statement,
    list_tables_statement,
    validate_identifier
)

logger = logging.getLogger(__name__)


class ViewResult:
    """
    One page of a table view together with its pagination totals.
    """

    def __init__(self,
                 rows: List[Dict[str, Any]],
                 total_count: int,
                 current_page: int,
                 page_size: int):
        """
        Initialize a view result.

        Args:
            rows (List[Dict[str, Any]]): Rows of the page
            total_count (int): Rows matching the filters across all pages
            current_page (int): Page number (starting from 1)
            page_size (int): Rows per page
        """
        self.rows = rows[:page_size]
        self.total_count = total_count
        self.current_page = current_page
        self.page_size = page_size

    @property
    def total_pages(self) -> int:
        return (self.total_count + self.page_size - 1) // self.page_size

    @property
    def column_names(self) -> List[str]:
        return list(self.rows[0].keys()) if self.rows else []

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the result to its wire representation.

        Returns:
            Dict[str, Any]: ``rows``, ``totalCount``, ``currentPage`` and ``totalPages``
        """
        return {
            'rows': self.rows,
            'totalCount': self.total_count,
            'currentPage': self.current_page,
            'totalPages': self.total_pages
        }

    def __len__(self) -> int:
        return len(self.rows)

    def __bool__(self) -> bool:
        return bool(self.rows)


class DataGateway:
    """
    Runs table-view and introspection statements through the configured backend.

    The database to target is passed into every call; the gateway holds no
    per-request state and can be shared between concurrent requests.
    """

    def __init__(self,
                 backend: BackendStrategy,
                 error_handler: Optional[DatabaseErrorHandler] = None):
        """
        Initialize the gateway.

        Args:
            backend (BackendStrategy): Execution path chosen at start-up
            error_handler (Optional[DatabaseErrorHandler]): Retry and error conversion policy
        """
        self._backend = backend
        self._error_handler = error_handler or DatabaseErrorHandler()

    @property
    def backend(self) -> BackendStrategy:
        return self._backend

    def fetch_rows(self, request: ViewRequest, database: Optional[str] = None) -> ViewResult:
        """
        Fetch one page of a table.

        Args:
            request (ViewRequest): Table, page, sort and filters
            database (Optional[str]): Database holding the table

        Returns:
            ViewResult: Rows of the page and pagination totals

        Raises:
            InvalidIdentifierError: If the request names an unsafe table or column
            NoDataError: If the page holds no rows
            BackendError: If the backend fails
        """
        count_statement, data_statement = build_statements(request)
        if database is not None:
            validate_identifier(database, "database")

        count_rows = self._run(count_statement, database, "row count")
        total_count = self._extract_total(count_rows)

        rows = self._run(data_statement, database, "row fetch")
        if not rows:
            raise NoDataError()

        result = ViewResult(rows, total_count, request.page, request.page_size)
        logger.info(
            f"Fetched {len(result)} rows from {request.table} "
            f"(page {result.current_page}/{result.total_pages}, total {result.total_count})"
        )
        return result

    def list_databases(self) -> List[Dict[str, Any]]:
        """
        List the databases visible to the backend.

        Raises:
            NoDataError: If no database is visible
            BackendError: If the backend fails
        """
        rows = self._run(list_databases_statement(self._backend.dialect), None, "database listing")
        if not rows:
            raise NoDataError("No databases found")
        return rows

    def list_tables(self, database: str) -> List[Dict[str, Any]]:
        """
        List the tables of one database.

        The backend is pointed at ``database`` before the listing statement
        runs, and only for this call.

        Args:
            database (str): Database to inspect

        Raises:
            InvalidRequestError: If no database is given
            InvalidIdentifierError: If the database name is unsafe
            NoDataError: If the database has no tables
            BackendError: If the backend fails
        """
        if not database:
            raise InvalidRequestError("Database name is required")
        validate_identifier(database, "database")

        rows = self._run(list_tables_statement(self._backend.dialect), database, "table listing")
        if not rows:
            raise NoDataError("No tables found in database")
        return rows

    def _run(self, statement: BuiltStatement, database: Optional[str], operation: str) -> List[Dict[str, Any]]:
        start_time = time.time()
        rows = self._error_handler.execute_with_retry(
            self._backend.execute,
            statement.text,
            statement.params,
            database,
            operation_name=operation,
            context={"statement": statement.text, "database": database, "backend": self._backend.name}
        )
        logger.debug(
            f"{operation}: {statement.text} [{len(statement.params)} params] "
            f"-> {len(rows)} rows in {time.time() - start_time:.3f}s"
        )
        return rows

    @staticmethod
    def _extract_total(rows: List[Dict[str, Any]]) -> int:
        if not rows:
            return 0
        first_row = rows[0]
        value = first_row.get('total', next(iter(first_row.values()), 0))
        return int(value or 0)
