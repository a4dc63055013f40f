# src/db_navigator/config/__init__.py
from .base_config import BaseConfig
from .logging_config import LoggingConfig
from .database_config import DatabaseConfig
from .proxy_config import ProxyConfig
from .api_config import ApiConfig

__all__ = [
    'BaseConfig',
    'LoggingConfig',
    'DatabaseConfig',
    'ProxyConfig',
    'ApiConfig'
]
