# src/db_navigator/database/backend_factory.py
import logging
from typing import Optional

from db_navigator.config.database_config import DatabaseConfig
from db_navigator.config.proxy_config import ProxyConfig
from db_navigator.core.interfaces.backend_interface import BackendStrategy
from db_navigator.database.direct_backend import DirectBackend
from db_navigator.database.error_handler import DatabaseErrorHandler
from db_navigator.database.gateway import DataGateway
from db_navigator.database.proxy_backend import ProxyBackend

logger = logging.getLogger(__name__)


def create_backend(database_config: Optional[DatabaseConfig] = None,
                   proxy_config: Optional[ProxyConfig] = None) -> BackendStrategy:
    """
    Create the backend selected by configuration.

    Args:
        database_config (Optional[DatabaseConfig]): Backend selection and direct settings
        proxy_config (Optional[ProxyConfig]): Remote query service settings

    Returns:
        BackendStrategy: Direct or proxy backend
    """
    database_config = database_config or DatabaseConfig()
    backend_type = database_config.get_backend_type()

    if backend_type == DatabaseConfig.PROXY:
        backend = ProxyBackend.from_config(proxy_config or ProxyConfig())
    else:
        backend = DirectBackend(database_config)

    logger.info(f"Using {backend.name} query backend ({backend.dialect} dialect)")
    return backend


def create_gateway(backend: BackendStrategy,
                   database_config: Optional[DatabaseConfig] = None) -> DataGateway:
    """
    Wrap a backend in a gateway using the configured retry policy.

    Args:
        backend (BackendStrategy): Backend created at start-up
        database_config (Optional[DatabaseConfig]): Source of the retry settings

    Returns:
        DataGateway: Gateway over the backend
    """
    database_config = database_config or DatabaseConfig()
    error_handler = DatabaseErrorHandler(**database_config.get_retry_args())
    return DataGateway(backend, error_handler)
