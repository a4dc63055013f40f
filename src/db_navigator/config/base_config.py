# src/db_navigator/config/base_config.py
import os
import json
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union
from dotenv import load_dotenv

# Readers per configuration file suffix
FILE_READERS = {
    '.json': json.load,
    '.yml': yaml.safe_load,
    '.yaml': yaml.safe_load,
}


def parse_env_value(value: str) -> Any:
    """
    Convert an environment string to bool, int or float when it looks like one.

    Only ``true/yes/false/no`` become booleans, so numeric settings such as
    ``DB_MAX_RETRIES=0`` stay numbers.
    """
    lowered = value.strip().lower()
    if lowered in ('true', 'yes'):
        return True
    if lowered in ('false', 'no'):
        return False
    if lowered.isdigit():
        return int(lowered)
    if lowered.count('.') == 1 and lowered.replace('.', '', 1).isdigit():
        return float(lowered)
    return value


def read_config_file(path: Path) -> Any:
    """
    Parse a JSON or YAML configuration file.

    Raises:
        ValueError: If the file is missing or its suffix is not supported
    """
    if not path.exists():
        raise ValueError(f"Configuration file not found: {path}")

    reader = FILE_READERS.get(path.suffix.lower())
    if reader is None:
        raise ValueError(f"Unsupported configuration file format: {path.suffix}")

    with open(path, 'r') as f:
        return reader(f)


class BaseConfig:
    """
    Layered settings for one navigator component.

    Later layers win: component defaults, then an optional JSON/YAML file,
    then ``<PREFIX>_<KEY>`` environment variables (a ``.env`` file in the
    working directory is loaded first).
    """

    def __init__(self, config_name: str, env_prefix: str = ""):
        """
        Initialize base configuration.

        Args:
            config_name (str): Component name, also its section in a shared file
            env_prefix (str): Prefix for environment variables
        """
        self.config_name = config_name
        self.env_prefix = env_prefix
        self._default_config: Dict[str, Any] = {}
        self._config_data: Dict[str, Any] = {}
        self._config_file_path: Optional[Path] = None

        if Path('.env').exists():
            load_dotenv(dotenv_path=Path('.env'))

    def load_from_env(self) -> Dict[str, Any]:
        """
        Collect ``<PREFIX>_<KEY>`` variables as lowercase keys.

        Nothing is read without a prefix, so one component never picks up
        another component's settings.
        """
        if not self.env_prefix:
            return {}

        prefix = f"{self.env_prefix}_"
        return {
            name[len(prefix):].lower(): parse_env_value(value)
            for name, value in os.environ.items()
            if name.startswith(prefix) and name != prefix
        }

    def load_from_file(self, file_path: Union[str, Path]) -> Dict[str, Any]:
        """
        Read this component's values from a configuration file.

        A file may hold a single component's keys at the top level, or
        several components under their names (``database:``, ``api:``...).

        Args:
            file_path (Union[str, Path]): JSON or YAML file

        Returns:
            Dict[str, Any]: Values for this component
        """
        data = read_config_file(Path(file_path)) or {}
        section = data.get(self.config_name) if isinstance(data, dict) else None
        return section if isinstance(section, dict) else data

    def load_config(self, defaults: Optional[Dict[str, Any]] = None,
                    config_file: Optional[Union[str, Path]] = None,
                    env_override: bool = True) -> Dict[str, Any]:
        """
        Rebuild the settings from all layers.

        Args:
            defaults (Optional[Dict[str, Any]]): Base values, the component defaults when omitted
            config_file (Optional[Union[str, Path]]): File layer; remembered for later reloads
            env_override (bool): Whether environment variables are applied last

        Returns:
            Dict[str, Any]: Combined configuration
        """
        if config_file:
            path = Path(config_file)
            if not path.exists():
                raise ValueError(f"Configuration file not found: {path}")
            self._config_file_path = path

        config = dict(self._default_config if defaults is None else defaults)
        if self._config_file_path:
            config.update(self.load_from_file(self._config_file_path))
        if env_override:
            config.update(self.load_from_env())

        self._config_data = config
        return config

    def get(self, key: str, default: Any = None) -> Any:
        return self._config_data.get(key, default)

    def get_int(self, key: str, default: int = 0) -> int:
        value = self.get(key)
        return default if value in (None, "") else int(value)

    def get_float(self, key: str, default: float = 0.0) -> float:
        value = self.get(key)
        return default if value in (None, "") else float(value)

    def set(self, key: str, value: Any) -> None:
        self._config_data[key] = value
