# src/db_navigator/database/credentials.py
import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx
import keyring

from db_navigator.config.database_config import DatabaseConfig
from db_navigator.config.proxy_config import ProxyConfig
from db_navigator.core.exceptions.custom_exceptions import BackendUnavailableError

logger = logging.getLogger(__name__)

METADATA_IDENTITY_URL = (
    "http://metadata.google.internal/computeMetadata/v1/instance/"
    "service-accounts/default/identity"
)


class CredentialManager:
    """
    Resolves the password used by the direct backend.
    The configured password wins; otherwise the system keyring is asked.
    """

    def __init__(self, config: DatabaseConfig):
        self._config = config

    def get_database_password(self) -> Optional[str]:
        """
        Get the database password.

        Returns:
            Optional[str]: Password, or None when neither configuration nor keyring holds one
        """
        password = self._config.get('password')
        if password not in (None, ""):
            return str(password)

        user = self._config.get('user')
        if not user:
            return None

        service = self._config.get('keyring_service')
        password = keyring.get_password(service, str(user))
        if password is None:
            logger.debug(f"No keyring password stored for {service}/{user}")
        return password

    def set_keyring_password(self, password: str) -> None:
        """
        Store the database password in the system keyring.

        Args:
            password (str): Password to store for the configured user
        """
        user = self._config.get('user')
        if not user:
            raise ValueError("A database user is required to store a keyring password")
        keyring.set_password(self._config.get('keyring_service'), str(user), password)


class TokenProvider(ABC):
    """Supplies the bearer credential sent to the remote query service."""

    @abstractmethod
    def get_token(self) -> str:
        pass


class StaticTokenProvider(TokenProvider):
    """Token taken verbatim from configuration."""

    def __init__(self, token: str):
        self._token = token

    def get_token(self) -> str:
        return self._token


class MetadataTokenProvider(TokenProvider):
    """
    Fetches an identity token from the compute metadata server.
    A fresh token is requested for every call.
    """

    def __init__(self, audience: str, client: Optional[httpx.Client] = None, timeout: float = 5.0):
        self._audience = audience
        self._client = client or httpx.Client(timeout=timeout)

    def get_token(self) -> str:
        """
        Request an identity token for the configured audience.

        Raises:
            BackendUnavailableError: If the metadata server does not answer with a token
        """
        logger.debug("Requesting identity token from metadata server")
        try:
            response = self._client.get(
                METADATA_IDENTITY_URL,
                params={"audience": self._audience},
                headers={"Metadata-Flavor": "Google"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise BackendUnavailableError(
                message="Failed to get identity token",
                error_code="PROXY_TOKEN_ERROR",
                details=str(e)
            ) from e

        token = response.text.strip()
        if not token:
            raise BackendUnavailableError(
                message="Metadata server returned an empty identity token",
                error_code="PROXY_TOKEN_ERROR"
            )
        return token


def create_token_provider(config: ProxyConfig) -> TokenProvider:
    """
    Choose the token provider for the proxy backend.

    Args:
        config (ProxyConfig): Proxy configuration

    Returns:
        TokenProvider: Static provider when a token is configured, metadata provider otherwise
    """
    token = config.get_static_token()
    if token:
        return StaticTokenProvider(token)
    return MetadataTokenProvider(config.get_audience())
