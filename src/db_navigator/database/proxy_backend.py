# src/db_navigator/database/proxy_backend.py
import logging
from typing import Dict, Any, List, Optional, Sequence

import httpx

from db_navigator.config.proxy_config import ProxyConfig
from db_navigator.core.exceptions.custom_exceptions import BackendFailureError
from db_navigator.core.interfaces.backend_interface import BackendStrategy
from db_navigator.database.credentials import TokenProvider, create_token_provider

logger = logging.getLogger(__name__)


class ProxyBackend(BackendStrategy):
    """
    Forwards statements to a remote HTTP query service.

    The request body is ``{fun, projectId, datasetId, query, params}``; the
    requested database travels as ``datasetId``. The service answers with a
    JSON array of rows, or an object holding them under ``rows``.
    """

    name = "proxy"

    def __init__(self, base_url: str, project_id: Optional[str], dataset_id: Optional[str],
                 token_provider: TokenProvider, client: Optional[httpx.Client] = None,
                 timeout: float = 30.0):
        """
        Initialize the proxy backend.

        Args:
            base_url (str): Query service base URL
            project_id (Optional[str]): Project forwarded with every request
            dataset_id (Optional[str]): Dataset used when no database is requested
            token_provider (TokenProvider): Source of the bearer credential
            client (Optional[httpx.Client]): HTTP client, created when omitted
            timeout (float): Request timeout in seconds
        """
        self._base_url = base_url.rstrip('/')
        self._project_id = project_id
        self._dataset_id = dataset_id
        self._token_provider = token_provider
        self._client = client or httpx.Client(timeout=timeout)

    @classmethod
    def from_config(cls, config: ProxyConfig) -> "ProxyBackend":
        return cls(
            base_url=config.get_base_url(),
            project_id=config.get('project_id'),
            dataset_id=config.get('dataset_id'),
            token_provider=create_token_provider(config),
            timeout=config.get_float('timeout', 30.0),
        )

    def build_body(self, statement: str, params: Sequence[Any] = (),
                   database: Optional[str] = None) -> Dict[str, Any]:
        return {
            "fun": "get",
            "projectId": self._project_id,
            "datasetId": database or self._dataset_id,
            "query": statement,
            "params": list(params),
        }

    def execute(self, statement: str, params: Sequence[Any] = (),
                database: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Send one statement to the query service.

        Args:
            statement (str): Statement text with ``?`` placeholders
            params (Sequence[Any]): Bound values
            database (Optional[str]): Dataset to query, the configured one when None

        Returns:
            List[Dict[str, Any]]: Result rows

        Raises:
            httpx.HTTPError: On transport failures or error statuses
            BackendFailureError: If the response body does not hold rows
        """
        token = self._token_provider.get_token()
        response = self._client.post(
            f"{self._base_url}/query",
            json=self.build_body(statement, params, database),
            headers={"Authorization": f"Bearer {token}"},
        )
        if response.is_error:
            logger.error(f"Query service request failed: {response.text}")
        response.raise_for_status()

        try:
            payload = response.json()
        except ValueError as e:
            raise BackendFailureError(
                message="Query service returned a non-JSON response",
                statement=statement,
                error_code="PROXY_DECODE_ERROR",
                details=str(e)
            ) from e

        return self._decode_rows(payload, statement)

    def _decode_rows(self, payload: Any, statement: str) -> List[Dict[str, Any]]:
        rows = payload.get("rows") if isinstance(payload, dict) else payload
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            raise BackendFailureError(
                message="Query service returned an unexpected response shape",
                statement=statement,
                error_code="PROXY_DECODE_ERROR",
                details=type(payload).__name__
            )
        return rows

    def close(self) -> None:
        self._client.close()
