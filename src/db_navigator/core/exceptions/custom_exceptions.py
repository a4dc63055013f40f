# src/db_navigator/core/exceptions/custom_exceptions.py
from typing import Optional


class NavigatorError(Exception):
    """Base exception for the database navigator."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

    def get_user_message(self) -> str:
        """Get a user-friendly message."""
        return self.message


class InvalidIdentifierError(NavigatorError):
    """Raised when a table, column or database name fails the safe-identifier check."""

    def __init__(self, identifier: str, kind: str = "identifier"):
        self.identifier = identifier
        self.kind = kind
        super().__init__(
            f"Invalid {kind} name: {identifier!r}. "
            "Only letters, digits and underscores are allowed."
        )


class InvalidRequestError(NavigatorError):
    """Raised when request parameters are missing or malformed."""


class NoDataError(NavigatorError):
    """Raised when a query succeeded but produced no rows."""

    def __init__(self, message: str = "No data found"):
        super().__init__(message)


class BackendError(NavigatorError):
    """Base class for failures of the query backend."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[str] = None):
        self.error_code = error_code
        self.details = details
        super().__init__(message)


class BackendUnavailableError(BackendError):
    """Raised when the backend cannot be reached (connection or transport failure)."""

    def get_user_message(self) -> str:
        """Get a user-friendly message about the connection error."""
        return f"Unable to reach the database backend. {self.message}"


class BackendFailureError(BackendError):
    """Raised when the backend was reached but the statement failed."""

    def __init__(self, message: str, statement: Optional[str] = None,
                 error_code: Optional[str] = None, details: Optional[str] = None):
        self.statement = statement
        super().__init__(message, error_code=error_code, details=details)

    def get_user_message(self) -> str:
        """Hide driver wording for rejected or forbidden statements; the details keep it."""
        if self.details and "syntax" in self.details.lower():
            return "The generated query was rejected by the database."
        if self.details and "permission" in self.details.lower():
            return "You don't have permission to read this table."
        return self.message


class ApiRequestError(NavigatorError):
    """Raised by the client when a View API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
