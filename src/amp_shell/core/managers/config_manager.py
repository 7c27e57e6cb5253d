# src/amp_shell/core/managers/config_manager.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from amp_shell.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    A singleton class to manage the application's configuration.
    It loads settings from a JSON file and allows for in-memory modifications.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        """Loads the configuration from the bundled settings file."""
        self._config: Dict[str, Any] = {}
        self._source: Optional[Path] = None
        self.reset()
        logger.debug("ConfigManager initialized.")

    def get_all(self) -> Dict[str, Any]:
        """Returns the entire current configuration dictionary."""
        return self._config

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """
        Safely retrieves a nested value from the configuration.
        e.g., 'bento.cdn_base_url'.
        """
        keys = key_path.split('.')
        value = self._config
        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
            else:
                return default
        return value if value is not None else default

    def set_nested(self, key_path: str, value: Any) -> bool:
        """
        Sets a nested value in the in-memory configuration.
        e.g., 'debug.level', 'INFO'
        """
        keys = key_path.split('.')
        d = self._config
        for key in keys[:-1]:
            d = d.setdefault(key, {})
            if not isinstance(d, dict):
                logger.error("Cannot set value: '%s' is not a dictionary.", key)
                return False

        # Cast to the type of the value being replaced
        original_value = d.get(keys[-1])
        if original_value is not None:
            try:
                value = type(original_value)(value)
            except (ValueError, TypeError):
                logger.warning(
                    "Could not cast new value for '%s' to type %s. Storing as given.",
                    key_path, type(original_value).__name__
                )

        d[keys[-1]] = value
        logger.info("Configuration updated: %s = %s", key_path, value)
        return True

    def load_file(self, path: Union[str, Path]) -> bool:
        """
        Replaces the in-memory configuration with the contents of `path`.
        Subsequent calls to reset() reload from this file.
        """
        config_path = Path(path)
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load settings from %s: %s", config_path, e)
            return False

        if not isinstance(data, dict):
            logger.error("Settings file %s must contain a JSON object.", config_path)
            return False

        self._source = config_path
        self._config = data
        logger.info("Configuration loaded from %s.", config_path)
        return True

    def reset(self):
        """Resets the in-memory configuration from the active settings file."""
        config_path = self._source or PathUtils.get_settings_file()
        try:
            if not config_path.exists():
                logger.warning("Settings file not found at %s. Using empty config.", config_path)
                self._config = {}
                return
            with open(config_path, "r", encoding="utf-8") as f:
                self._config = json.load(f)
            logger.info("Configuration has been (re)loaded from %s.", config_path.name)
        except Exception as e:
            logger.error("Failed to load %s: %s", config_path, e, exc_info=True)
            self._config = {}


# The global singleton instance that the entire application will use.
config_manager = ConfigManager()
