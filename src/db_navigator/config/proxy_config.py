# src/db_navigator/config/proxy_config.py
from typing import Optional

from db_navigator.config.base_config import BaseConfig


class ProxyConfig(BaseConfig):
    """
    Configuration for the remote query service used by the proxy backend.
    """

    def __init__(self, env_prefix: str = "PROXY"):
        """
        Initialize proxy configuration.

        Args:
            env_prefix (str): Prefix for environment variables
        """
        super().__init__("proxy", env_prefix)

        self._default_config = {
            'url': None,
            'project_id': None,
            'dataset_id': None,
            'token': None,
            'audience': None,
            'timeout': 30,
        }
        self.load_config()

    def get_base_url(self) -> str:
        """
        Get the query service base URL.

        Raises:
            ValueError: If no URL is configured
        """
        url = self.get('url')
        if not url:
            raise ValueError(f"Missing {self.env_prefix}_URL for the proxy backend")
        return str(url).rstrip('/')

    def get_audience(self) -> str:
        """Audience requested for identity tokens, the service URL unless set."""
        return str(self.get('audience') or self.get_base_url())

    def get_static_token(self) -> Optional[str]:
        token = self.get('token')
        return str(token) if token else None
