# src/db_navigator/client/api_client.py
import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from db_navigator.core.exceptions.custom_exceptions import ApiRequestError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5051"


def empty_page(page: int) -> Dict[str, Any]:
    return {"rows": [], "totalCount": 0, "currentPage": page, "totalPages": 0}


class NavigatorApiClient:
    """
    An asynchronous HTTP client for the database navigator view API.
    """

    def __init__(self, base_url: str = DEFAULT_API_URL, client: Optional[httpx.AsyncClient] = None,
                 timeout: float = 30.0):
        """
        Initializes the asynchronous HTTP client.

        Args:
            base_url: Root URL of the view API
            client: Preconfigured client, mainly for tests
            timeout: Request timeout in seconds
        """
        self.client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        try:
            return await self.client.get(path, params=params)
        except httpx.RequestError as e:
            logger.error(f"Request to {path} failed: {e}")
            raise ApiRequestError(f"Request to {path} failed: {e}") from e

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return

        message = f"HTTP error! status: {response.status_code}"
        try:
            body = response.json()
            if isinstance(body, dict) and body.get("error"):
                message = f"{message} - {body['error']}"
        except ValueError:
            pass
        raise ApiRequestError(message, status_code=response.status_code)

    @staticmethod
    def _first_values(rows: List[Dict[str, Any]]) -> List[str]:
        # Listing rows carry a single, backend-specific column name
        return [str(next(iter(row.values()))) for row in rows if row]

    async def list_databases(self) -> List[str]:
        """
        Fetches database names.

        Returns:
            A list of database names.
        """
        response = await self._get("/api/databases")
        if response.status_code == 404:
            return []
        self._raise_for_status(response)
        return self._first_values(response.json())

    async def list_tables(self, database: str) -> List[str]:
        """
        Fetches the table names of a database.

        Args:
            database: Database to inspect.

        Returns:
            A list of table names, empty when the database has none.
        """
        response = await self._get(f"/api/tableNames/{database}")
        if response.status_code == 404:
            return []
        self._raise_for_status(response)
        return self._first_values(response.json())

    async def fetch_rows(self, database: Optional[str], table: str, page: int, page_size: int,
                         sort_by: Optional[str] = None, sort_direction: Optional[str] = None,
                         filters: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """
        Fetches one page of a table.

        Only non-blank filters are sent. A 404 answer means the filtered view
        is empty and is returned as an empty page rather than an error.

        Returns:
            A dictionary with ``rows``, ``totalCount``, ``currentPage`` and ``totalPages``.

        Raises:
            ApiRequestError: On transport failures and non-2xx answers other than 404.
        """
        params: Dict[str, Any] = {}
        if database:
            params["db"] = database
        if sort_by:
            params["sortBy"] = sort_by
            params["sortDirection"] = sort_direction or "asc"

        active = {column: value for column, value in (filters or {}).items() if value.strip()}
        if active:
            params["filters"] = json.dumps(active)

        path = f"/api/rows/{table}/{page}/{page_size}"
        logger.debug(f"Fetching {path} with {params}")
        response = await self._get(path, params=params)

        if response.status_code == 404:
            return empty_page(page)
        self._raise_for_status(response)
        return response.json()

    async def aclose(self) -> None:
        await self.client.aclose()
