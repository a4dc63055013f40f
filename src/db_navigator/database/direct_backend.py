# src/db_navigator/database/direct_backend.py
import base64
import logging
import re
from typing import Dict, Any, List, Optional, Sequence, Tuple

import sqlalchemy as sa
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool

from db_navigator.config.database_config import DatabaseConfig
from db_navigator.core.exceptions.custom_exceptions import InvalidRequestError
from db_navigator.core.interfaces.backend_interface import BackendStrategy
from db_navigator.database.credentials import CredentialManager

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r'\?')


def bind_positional(statement: str, params: Sequence[Any]) -> Tuple[str, Dict[str, Any]]:
    """
    Rewrite positional ``?`` placeholders as SQLAlchemy named binds.

    Args:
        statement (str): Statement text with ``?`` placeholders
        params (Sequence[Any]): Values in placeholder order

    Returns:
        Tuple[str, Dict[str, Any]]: Text with ``:p0``, ``:p1``... and the matching bind mapping

    Raises:
        ValueError: If the placeholder count differs from the number of values
    """
    expected = len(_PLACEHOLDER.findall(statement))
    if expected != len(params):
        raise ValueError(f"Statement has {expected} placeholders but {len(params)} parameters were given")

    counter = iter(range(expected))
    text = _PLACEHOLDER.sub(lambda _: f":p{next(counter)}", statement)
    return text, {f"p{i}": value for i, value in enumerate(params)}


def json_safe(value: Any) -> Any:
    """Binary column values (BLOB, VARBINARY...) are returned base64-encoded."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return value


class DirectBackend(BackendStrategy):
    """
    Runs statements over a direct SQLAlchemy connection.

    Each call opens one connection to the requested database and closes it
    before returning, whether the statement succeeded or not. The target
    database is a call argument, never state kept on the backend.
    """

    name = "direct"

    def __init__(self, config: DatabaseConfig, credentials: Optional[CredentialManager] = None,
                 connect_args: Optional[Dict[str, Any]] = None):
        """
        Initialize the direct backend.

        Args:
            config (DatabaseConfig): Connection settings
            credentials (Optional[CredentialManager]): Password resolver
            connect_args (Optional[Dict[str, Any]]): Extra DBAPI connect arguments
        """
        self._config = config
        self._credentials = credentials or CredentialManager(config)
        self._connect_args = connect_args or {}

    @property
    def dialect(self) -> str:
        return self._config.get_dialect()

    def _resolve_database(self, database: Optional[str]) -> Optional[str]:
        default = self._config.get_default_database()
        if not database or database == default:
            return default
        # Without a directory the name would become a new relative file
        if self.dialect == "sqlite" and not self._config.get('sqlite_dir'):
            raise InvalidRequestError("Selecting a SQLite database requires DB_SQLITE_DIR to be set")
        return database

    def _create_engine(self, database: Optional[str]) -> Engine:
        url = self._config.build_url(database, password=self._credentials.get_database_password())
        logger.debug(f"Opening connection to {url.render_as_string(hide_password=True)}")
        return sa.create_engine(url, poolclass=NullPool, connect_args=self._connect_args)

    def execute(self, statement: str, params: Sequence[Any] = (),
                database: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Execute a statement against one database.

        Args:
            statement (str): Statement text with ``?`` placeholders
            params (Sequence[Any]): Bound values
            database (Optional[str]): Database to connect to, the configured default when None

        Returns:
            List[Dict[str, Any]]: Result rows
        """
        text, binds = bind_positional(statement, params)
        engine = self._create_engine(self._resolve_database(database))
        try:
            with engine.connect() as connection:
                result = connection.execute(sa.text(text), binds)
                if not result.returns_rows:
                    return []

                columns = list(result.keys())
                return [{column: json_safe(value) for column, value in zip(columns, row)} for row in result]
        finally:
            engine.dispose()
