"""
Configuration Manager module for the genmon-info utilities.
"""
import copy
import json
import os
from typing import Any, Optional, Dict

from genmon_info.core.errors import PreconditionError
from genmon_info.utils import get_logger, expand_home

logger = get_logger(__name__)

CONFIG_ENV_VAR = "GENMON_INFO_CONFIG"
CONFIG_DIR_NAME = "genmon-info"
CONFIG_FILENAME = "config.json"

DEFAULT_CONFIG: Dict[str, Any] = {
    "cache": {
        "directory": None,
    },
    "icons": {
        "directory": "~/.genmon-icon",
    },
    "cpu": {
        "cores": None,
        "hardware_class": "desktop",
    },
    "sensors": {
        "command": ["sensors"],
        "timeout": 5,
        "temperature_label": "temp1",
        "fan_label": "CPU Fan Speed",
    },
    "disk": {
        "read_temperature": True,
        "temperature_command": ["sudo", "hddtemp"],
        "temperature_timeout": 5,
    },
    "network": {
        "min_elapsed": 0.001,
    },
    "logging": {
        "file": None,
        "file_level": "DEBUG",
        "max_bytes": 1024 * 1024,
        "backup_count": 3,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def default_config_path() -> str:
    """
    Returns the configuration path used when none is given on the command
    line: ``$GENMON_INFO_CONFIG``, else ``$XDG_CONFIG_HOME/genmon-info/config.json``.

    :return: Configuration file path
    :rtype: str
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return env_path
    config_home = os.environ.get("XDG_CONFIG_HOME") or expand_home("~/.config")
    return os.path.join(config_home, CONFIG_DIR_NAME, CONFIG_FILENAME)


class ConfigManager:
    """
    Loads the optional JSON configuration file and serves values from it,
    falling back to built-in defaults.
    """

    def __init__(self, config_path: Optional[str] = None, required: bool = False,
                 overrides: Optional[Dict[str, Any]] = None):
        """
        Initializes the ConfigManager by loading the configuration file.

        :param config_path: Path to the JSON configuration file; None uses
                            ``default_config_path()``
        :type config_path: Optional[str]
        :param required: When True a missing file is an error, otherwise a
                         missing file means "all defaults"
        :type required: bool
        :param overrides: Values applied on top of the file, mostly for tests
        :type overrides: Optional[Dict[str, Any]]
        :raises PreconditionError: If the file is required but missing, is
                                   unreadable, or is not a JSON object
        """
        self._config_path = config_path or default_config_path()
        self._config_data: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)

        file_data = self._load_config(required)
        if file_data:
            self._config_data = _merge(self._config_data, file_data)
        if overrides:
            self._config_data = _merge(self._config_data, overrides)

    @property
    def config_path(self) -> str:
        return self._config_path

    def _load_config(self, required: bool) -> Dict[str, Any]:
        """
        Loads the configuration data from the JSON file.

        :param required: Whether a missing file is an error
        :type required: bool
        :return: Parsed configuration, empty when the optional file is absent
        :rtype: Dict[str, Any]
        :raises PreconditionError: On a missing required file or invalid content
        """
        if not os.path.exists(self._config_path):
            if required:
                logger.error(f"Configuration file not found: {self._config_path}")
                raise PreconditionError(f"Configuration file not found: {self._config_path}")
            logger.debug(f"No configuration file at {self._config_path}, using defaults.")
            return {}

        try:
            with open(self._config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Error decoding JSON from config file {self._config_path}: {e}")
            raise PreconditionError(f"Invalid JSON in configuration file {self._config_path}: {e}") from e
        except OSError as e:
            logger.error(f"Error reading config file {self._config_path}: {e}")
            raise PreconditionError(f"Could not read configuration file {self._config_path}: {e}") from e

        if not isinstance(data, dict):
            raise PreconditionError(f"Configuration file {self._config_path} is not a JSON object.")

        logger.debug(f"Configuration loaded from: {self._config_path}")
        return data

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Retrieves a configuration value using a dot-separated key path.

        :param key_path: The dot-separated path to the configuration key
        :type key_path: str
        :param default: The default value to return if the key is not found
        :type default: Any
        :return: The configuration value or the default value
        :rtype: Any
        """
        value: Any = self._config_data
        for key in key_path.split('.'):
            if not isinstance(value, dict) or key not in value:
                logger.debug(f"Configuration key not found: '{key_path}'. Returning default: {default}")
                return default
            value = value[key]
        return default if value is None else value
