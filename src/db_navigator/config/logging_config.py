# src/db_navigator/config/logging_config.py
import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, Optional, Union

from db_navigator.config.base_config import BaseConfig


class LoggingConfig(BaseConfig):
    """
    Configuration for application logging.
    Console output is always enabled; rotating log files are optional.
    """

    DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s'

    def __init__(self, env_prefix: str = "LOG"):
        """
        Initialize logging configuration.

        Args:
            env_prefix (str): Prefix for environment variables
        """
        super().__init__("logging", env_prefix)

        self._default_config = {
            'level': 'INFO',
            'format': self.DEFAULT_FORMAT,
            'to_file': False,
            'dir': 'logs',
            'max_bytes': 10485760,  # 10MB
            'backup_count': 5,
            'sqlalchemy_level': 'WARNING',
        }

    def build_dict_config(self) -> Dict[str, Any]:
        """
        Build a ``logging.config.dictConfig`` mapping from the loaded values.

        Returns:
            Dict[str, Any]: dictConfig schema
        """
        level = str(self.get('level', 'INFO')).upper()
        handlers = {
            'console': {
                'class': 'logging.StreamHandler',
                'level': level,
                'formatter': 'standard',
                'stream': 'ext://sys.stdout'
            }
        }

        if self.get('to_file'):
            log_dir = Path(self.get('dir', 'logs'))
            handlers['file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': 'DEBUG',
                'formatter': 'detailed',
                'filename': str(log_dir / 'navigator.log'),
                'maxBytes': self.get('max_bytes'),
                'backupCount': self.get('backup_count')
            }
            handlers['error_file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': 'ERROR',
                'formatter': 'detailed',
                'filename': str(log_dir / 'error.log'),
                'maxBytes': self.get('max_bytes'),
                'backupCount': self.get('backup_count')
            }

        return {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'standard': {'format': self.get('format', self.DEFAULT_FORMAT)},
                'detailed': {'format': self.DETAILED_FORMAT}
            },
            'handlers': handlers,
            'loggers': {
                '': {
                    'handlers': list(handlers),
                    'level': level,
                },
                'sqlalchemy.engine': {
                    'level': str(self.get('sqlalchemy_level', 'WARNING')).upper(),
                },
                'httpx': {
                    'level': 'WARNING',
                },
            }
        }

    def configure(self, config_file: Optional[Union[str, Path]] = None) -> None:
        """
        Configure logging system.

        Args:
            config_file (Optional[Union[str, Path]]): Path to logging configuration file
        """
        self.load_config(config_file=config_file, env_override=True)

        if self.get('to_file'):
            Path(self.get('dir', 'logs')).mkdir(parents=True, exist_ok=True)

        logging.config.dictConfig(self.build_dict_config())

        logging.getLogger(__name__).info(f"Logging configured with level: {self.get_root_level()}")

    def get_root_level(self) -> str:
        """
        Get the root logger level name.

        Returns:
            str: Level name (DEBUG, INFO, etc.)
        """
        return logging.getLevelName(logging.getLogger().level)

    def get_logger(self, name: str) -> logging.Logger:
        """
        Get a logger with the specified name.

        Args:
            name (str): Logger name

        Returns:
            logging.Logger: Configured logger
        """
        return logging.getLogger(name)
