# src/db_navigator/database/__init__.py
from db_navigator.database.query_builder import (
    ViewRequest,
    SortSpec,
    BuiltStatement,
    build_statements,
    validate_identifier
)
from db_navigator.database.error_handler import DatabaseErrorHandler
from db_navigator.database.direct_backend import DirectBackend
from db_navigator.database.proxy_backend import ProxyBackend
from db_navigator.database.gateway import DataGateway, ViewResult
from db_navigator.database.backend_factory import create_backend, create_gateway

# Export these classes
__all__ = [
    'ViewRequest',
    'SortSpec',
    'BuiltStatement',
    'build_statements',
    'validate_identifier',
    'DatabaseErrorHandler',
    'DirectBackend',
    'ProxyBackend',
    'DataGateway',
    'ViewResult',
    'create_backend',
    'create_gateway'
]
