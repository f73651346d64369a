# src/formfixer/managers/config_manager.py
import json
import logging
from typing import Any, Dict, Iterable, Optional

from formfixer.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigManager:
    """
    Singleton holding the formfixer settings.

    Values are read from the packaged settings.json and can be overridden in
    memory, e.g. from `formfixer --set server.port=8080`.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._config = {}
            cls._instance.reset()
        return cls._instance

    def get_all(self) -> Dict[str, Any]:
        return self._config

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """Dotted lookup ('accessibility.timeout_ms'); missing or null values give `default`."""
        value = self._config
        for key in key_path.split('.'):
            if not isinstance(value, dict):
                return default
            value = value.get(key)
        return default if value is None else value

    def set_nested(self, key_path: str, value: Any) -> bool:
        """
        Sets a dotted key in memory, creating intermediate sections.

        String values are cast to the type of the value they replace, so a
        command-line override keeps ints as ints and booleans as booleans.
        Returns False when a parent key holds a non-section value.
        """
        *parents, leaf = key_path.split('.')
        section = self._config
        for key in parents:
            section = section.setdefault(key, {})
            if not isinstance(section, dict):
                logger.error("Cannot set '%s': '%s' is not a section.", key_path, key)
                return False

        section[leaf] = self._cast(key_path, value, section.get(leaf))
        logger.debug("Configuration override: %s = %r", key_path, section[leaf])
        return True

    def apply_overrides(self, pairs: Iterable[str]) -> None:
        """Applies 'key.path=value' strings; raises ValueError on a malformed pair."""
        for pair in pairs:
            key_path, sep, value = pair.partition('=')
            if not sep or not key_path.strip():
                raise ValueError(f"Expected KEY=VALUE, got '{pair}'")
            if not self.set_nested(key_path.strip(), value.strip()):
                raise ValueError(f"Cannot override '{key_path.strip()}'")

    @staticmethod
    def _cast(key_path: str, value: Any, current: Any) -> Any:
        if current is None or not isinstance(value, str):
            return value
        if isinstance(current, bool):
            lowered = value.lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
        elif isinstance(current, list):
            return [item.strip() for item in value.split(',') if item.strip()]
        else:
            try:
                return type(current)(value)
            except (ValueError, TypeError):
                pass
        logger.warning(
            "Could not cast '%s' for '%s' to %s. Storing as string.",
            value, key_path, type(current).__name__
        )
        return value

    def reset(self) -> None:
        """Reloads settings.json, discarding in-memory overrides."""
        config_path = PathUtils.get_settings_file()
        if not config_path.exists():
            logger.warning("settings.json not found at %s. Using empty config.", config_path)
            self._config = {}
            return
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                self._config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load settings.json: %s", e, exc_info=True)
            self._config = {}


# The global singleton instance that the entire application will use.
config_manager = ConfigManager()
