# src/db_navigator/config/database_config.py
from pathlib import Path
from typing import Any, Dict, Optional

from sqlalchemy.engine import URL, make_url

from db_navigator.config.base_config import BaseConfig


class DatabaseConfig(BaseConfig):
    """
    Configuration for the query backend.
    Selects the backend variant and holds the direct-connection settings.
    """

    DIRECT = "direct"
    PROXY = "proxy"

    # Default ports per SQLAlchemy backend name
    DEFAULT_PORTS = {
        "mysql": 3306,
        "postgresql": 5432,
        "mssql": 1433,
        "oracle": 1521,
    }

    def __init__(self, env_prefix: str = "DB"):
        """
        Initialize database configuration.

        Args:
            env_prefix (str): Prefix for environment variables
        """
        super().__init__("database", env_prefix)

        self._default_config = {
            'backend': self.DIRECT,
            'driver': 'mysql+pymysql',
            'host': '127.0.0.1',
            'port': None,
            'user': None,
            'password': None,
            'database': None,
            'sqlite_dir': None,
            'keyring_service': 'db_navigator',
            'max_retries': 2,
            'retry_delay': 0.5,
        }
        self.load_config()

    def get_backend_type(self) -> str:
        """
        Get the configured backend variant.

        Returns:
            str: ``direct`` or ``proxy``

        Raises:
            ValueError: If the configured value is not a known backend
        """
        backend = str(self.get('backend', self.DIRECT)).lower()
        if backend not in (self.DIRECT, self.PROXY):
            raise ValueError(f"Unsupported backend type: {backend}")
        return backend

    def get_dialect(self) -> str:
        """Get the SQLAlchemy backend name of the configured driver (``mysql``, ``sqlite``...)."""
        return make_url(f"{self.get('driver')}://").get_backend_name()

    def get_default_database(self) -> Optional[str]:
        database = self.get('database')
        return str(database) if database not in (None, "") else None

    def build_url(self, database: Optional[str], password: Optional[str] = None) -> URL:
        """
        Build the connection URL for one database.

        Args:
            database (Optional[str]): Target database (a file path for SQLite)
            password (Optional[str]): Password overriding the configured one

        Returns:
            URL: SQLAlchemy connection URL
        """
        driver = self.get('driver')
        if self.get_dialect() == "sqlite":
            # With a directory configured, databases are addressed by file stem
            if database and self.get('sqlite_dir'):
                database = str(Path(self.get('sqlite_dir')) / f"{database}.db")
            return URL.create(driver, database=database)

        port = self.get('port') or self.DEFAULT_PORTS.get(self.get_dialect())
        user = self.get('user')
        if password is None and self.get('password') is not None:
            password = str(self.get('password'))

        return URL.create(
            driver,
            username=str(user) if user is not None else None,
            password=password,
            host=self.get('host'),
            port=int(port) if port else None,
            database=database,
        )

    def get_retry_args(self) -> Dict[str, Any]:
        """
        Get retry arguments for the database error handler.

        Returns:
            Dict[str, Any]: Keyword arguments for ``DatabaseErrorHandler``
        """
        return {
            "max_retries": self.get_int('max_retries', 2),
            "retry_delay": self.get_float('retry_delay', 0.5),
        }
