# src/db_navigator/core/exceptions/__init__.py
from .custom_exceptions import (
    NavigatorError,
    InvalidIdentifierError,
    InvalidRequestError,
    NoDataError,
    BackendError,
    BackendUnavailableError,
    BackendFailureError,
    ApiRequestError
)

__all__ = [
    'NavigatorError',
    'InvalidIdentifierError',
    'InvalidRequestError',
    'NoDataError',
    'BackendError',
    'BackendUnavailableError',
    'BackendFailureError',
    'ApiRequestError'
]
