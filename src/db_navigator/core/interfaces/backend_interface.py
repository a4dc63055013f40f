from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional, Sequence


class BackendStrategy(ABC):
    """Abstract base class for the interchangeable query execution paths."""

    #: Short name used in logs and configuration.
    name: str = "backend"

    @property
    def dialect(self) -> str:
        """SQL dialect spoken by the backend (drives introspection statements)."""
        return "mysql"

    @abstractmethod
    def execute(self, statement: str, params: Sequence[Any] = (),
                database: Optional[str] = None) -> List[Dict[str, Any]]:
        """Execute a statement and return its rows.

        Args:
            statement (str): Statement text with positional ``?`` placeholders.
            params (Sequence[Any]): Values bound to the placeholders, in order.
            database (Optional[str]): Database the statement targets.

        Returns:
            List[Dict[str, Any]]: Rows as column name to value mappings.
        """
        pass

    def close(self) -> None:
        """Release long-lived resources held by the backend."""
        pass
