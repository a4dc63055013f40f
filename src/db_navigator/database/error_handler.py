# src/db_navigator/database/error_handler.py
import logging
import time
from typing import Callable, Any, Optional, Dict

import httpx
from sqlalchemy.exc import SQLAlchemyError, OperationalError, InterfaceError, DBAPIError

from db_navigator.core.exceptions.custom_exceptions import (
    NavigatorError,
    BackendError,
    BackendUnavailableError,
    BackendFailureError
)

logger = logging.getLogger(__name__)


class DatabaseErrorHandler:
    """
    Centralized error handler for backend operations.
    Retries transient failures and converts driver and transport
    exceptions into the navigator's backend errors.
    """

    # Driver messages that mean the server was never reached or dropped the session
    CONNECTION_MARKERS = ("connect", "timeout", "timed out", "refused", "gone away", "lost")

    def __init__(
            self,
            max_retries: int = 2,
            retry_delay: float = 0.5,
            exponential_backoff: bool = True,
            log_level: int = logging.ERROR
    ):
        """
        Initialize the database error handler.

        Args:
            max_retries: Maximum number of retry attempts for transient errors
            retry_delay: Initial delay between retries in seconds
            exponential_backoff: Whether to use exponential backoff for retries
            log_level: Logging level for backend errors
        """
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.exponential_backoff = exponential_backoff
        self.log_level = log_level

    def handle_error(
            self,
            error: Exception,
            operation: str,
            context: Optional[Dict[str, Any]] = None
    ) -> NavigatorError:
        """
        Handle a backend error.

        Args:
            error: The original exception
            operation: Description of the operation being performed
            context: Additional context information

        Returns:
            NavigatorError: Appropriate navigator exception
        """
        context = context or {}

        if isinstance(error, NavigatorError):
            if isinstance(error, BackendError):
                self._log_error(error, operation, context)
            return error

        self._log_error(error, operation, context)

        if isinstance(error, SQLAlchemyError):
            return self._handle_sqlalchemy_error(error, operation, context)

        if isinstance(error, httpx.HTTPError):
            return self._handle_http_error(error, operation, context)

        return BackendFailureError(
            message=f"Unexpected error during {operation}",
            statement=context.get("statement"),
            error_code="BACKEND_UNKNOWN_ERROR",
            details=str(error)
        )

    def _handle_sqlalchemy_error(self, error: SQLAlchemyError, operation: str,
                                 context: Dict[str, Any]) -> NavigatorError:
        """Lost or refused connections are unavailability; everything else is a statement failure."""
        error_str = self._driver_message(error)

        if self.is_transient(error):
            return BackendUnavailableError(
                message=f"Database connection error during {operation}",
                error_code="DB_CONNECTION_ERROR",
                details=error_str
            )

        return BackendFailureError(
            message=f"Database error during {operation}",
            statement=context.get("statement"),
            error_code="DB_QUERY_ERROR",
            details=error_str
        )

    @staticmethod
    def _driver_message(error: SQLAlchemyError) -> str:
        # Keep the driver message without SQLAlchemy's statement/background suffix
        if isinstance(error, DBAPIError) and error.orig is not None:
            return str(error.orig)
        return str(error)

    def is_transient(self, error: Exception) -> bool:
        """
        Check whether an error is worth retrying.

        Transport failures always are. Operational and interface errors are
        only when the driver reports a lost or refused connection; the same
        classes also carry statement errors such as unknown columns.
        """
        if isinstance(error, httpx.TransportError):
            return True
        if isinstance(error, (OperationalError, InterfaceError)):
            lowered = self._driver_message(error).lower()
            return any(marker in lowered for marker in self.CONNECTION_MARKERS)
        return False

    def _handle_http_error(self, error: httpx.HTTPError, operation: str,
                           context: Dict[str, Any]) -> NavigatorError:
        # An answer with an error status means the service ran and rejected the statement
        if isinstance(error, httpx.HTTPStatusError):
            response = error.response
            return BackendFailureError(
                message=f"Query service rejected {operation} with status {response.status_code}",
                statement=context.get("statement"),
                error_code="PROXY_HTTP_ERROR",
                details=response.text
            )

        return BackendUnavailableError(
            message=f"Query service unreachable during {operation}",
            error_code="PROXY_TRANSPORT_ERROR",
            details=str(error) or error.__class__.__name__
        )

    def _log_error(self, error: Exception, operation: str, context: Dict[str, Any]) -> None:
        message = f"Backend error during {operation}: {str(error)}"

        # Bound parameters and credentials stay out of the logs
        safe_context = {k: v for k, v in context.items()
                        if not any(sensitive in k.lower()
                                   for sensitive in ['password', 'token', 'key', 'secret', 'params'])}

        logger.log(self.log_level, message, exc_info=True, extra={"context": safe_context})

    def execute_with_retry(
            self,
            func: Callable[..., Any],
            *args,
            operation_name: str = "database operation",
            context: Optional[Dict[str, Any]] = None,
            **kwargs
    ) -> Any:
        """
        Execute a backend operation with automatic retry for transient errors.

        Args:
            func: Function to execute
            *args: Arguments to pass to the function
            operation_name: Name of the operation for error messages
            context: Context attached to the converted error
            **kwargs: Keyword arguments to pass to the function

        Returns:
            Any: Result of the function

        Raises:
            NavigatorError: If the operation fails after retries
        """
        attempt = 0
        last_error = None

        while attempt <= self.max_retries:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                last_error = e

                if not self.is_transient(e):
                    break

                attempt += 1
                if attempt > self.max_retries:
                    break

                delay = self.retry_delay
                if self.exponential_backoff:
                    delay = self.retry_delay * (2 ** (attempt - 1))

                logger.warning(
                    f"Transient error during {operation_name} (attempt {attempt}/{self.max_retries}). "
                    f"Retrying in {delay:.2f} seconds. Error: {str(e)}"
                )

                time.sleep(delay)

        context = dict(context or {}, attempts=attempt)
        exception = self.handle_error(last_error, operation_name, context)
        if exception is last_error:
            raise exception
        raise exception from last_error
