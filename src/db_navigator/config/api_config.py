# src/db_navigator/config/api_config.py
from typing import List

from db_navigator.config.base_config import BaseConfig


class ApiConfig(BaseConfig):
    """
    Configuration for the HTTP view API.
    """

    def __init__(self, env_prefix: str = "API"):
        """
        Initialize API configuration.

        Args:
            env_prefix (str): Prefix for environment variables
        """
        super().__init__("api", env_prefix)

        self._default_config = {
            'host': '0.0.0.0',
            'port': 5051,
            'reload': False,
            'max_page_size': 1000,
            'cors_origins': '*',
        }
        self.load_config()

    def get_max_page_size(self) -> int:
        return self.get_int('max_page_size', 1000)

    def get_cors_origins(self) -> List[str]:
        """
        Get allowed CORS origins.

        Returns:
            List[str]: Origins from the comma separated setting
        """
        origins = str(self.get('cors_origins', '*'))
        return [origin.strip() for origin in origins.split(',') if origin.strip()]
