# src/db_navigator/web_interface/dependencies.py
from functools import lru_cache
import logging

from db_navigator.config.api_config import ApiConfig
from db_navigator.config.database_config import DatabaseConfig
from db_navigator.core.interfaces.backend_interface import BackendStrategy
from db_navigator.database.backend_factory import create_backend, create_gateway
from db_navigator.database.gateway import DataGateway

# Get logger
logger = logging.getLogger(__name__)

# Process-wide configuration, read once at import
api_config = ApiConfig()
database_config = DatabaseConfig()


@lru_cache(maxsize=1)
def get_backend() -> BackendStrategy:
    """
    Get the query backend selected for this process.
    """
    return create_backend(database_config)


@lru_cache(maxsize=1)
def get_gateway() -> DataGateway:
    """
    Get the data-access gateway over the process backend.
    """
    return create_gateway(get_backend(), database_config)


def get_api_config() -> ApiConfig:
    return api_config


def get_database_config() -> DatabaseConfig:
    return database_config


def shutdown_backend() -> None:
    """
    Close the process backend if one was created.
    """
    if get_backend.cache_info().currsize:
        logger.info("Closing query backend")
        get_backend().close()
    get_gateway.cache_clear()
    get_backend.cache_clear()
