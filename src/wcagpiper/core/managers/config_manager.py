# src/wcagpiper/core/managers/config_manager.py
import copy
import json
import logging
from typing import Any, Dict, Optional

from wcagpiper.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

# Every setting the analyzer reads, with its type. settings.json overrides these.
DEFAULTS: Dict[str, Any] = {
    "debug": {
        "level": "WARNING",
        "silenced_loggers": {"bs4": "ERROR"},
    },
    "normalizer": {
        "parser": "html.parser",
    },
    "auditor": {
        "snippet_max_length": 250,
        "heuristic_fallback": True,
    },
    "remediator": {
        "indent": 2,
        "format_output": True,
    },
}

TRUE_WORDS = ("1", "true", "yes", "on")


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively lays `overrides` over `base`; sections merge, values replace."""
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def _coerce(value: Any, like: Any) -> Any:
    """Casts a (command line) value to the type of the setting it replaces."""
    if like is None or not isinstance(value, str):
        return value
    if isinstance(like, bool):
        return value.strip().lower() in TRUE_WORDS
    if isinstance(like, (int, float)):
        return type(like)(value)
    if isinstance(like, dict):
        return json.loads(value)
    return value


class ConfigManager:
    """
    Singleton holding the analyzer settings: built-in defaults, overlaid with
    the bundled settings.json, overlaid with session overrides (`--set`).
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        self._config: Dict[str, Any] = {}
        self.reset()
        logger.debug("ConfigManager initialized.")

    def get_all(self) -> Dict[str, Any]:
        """The effective configuration."""
        return self._config

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """
        Retrieves a nested value, e.g. 'auditor.snippet_max_length'.
        Falls back to `default` when the key is missing or null.
        """
        value = self._config
        for key in key_path.split('.'):
            if isinstance(value, dict):
                value = value.get(key)
            else:
                return default
        return value if value is not None else default

    def set_nested(self, key_path: str, value: Any) -> bool:
        """
        Overrides one setting for this session. Text values are cast to the
        type of the current (or default) value; a value that does not cast is
        rejected and the setting is left as it was.
        """
        keys = key_path.split('.')
        section = self._config
        for key in keys[:-1]:
            section = section.setdefault(key, {})
            if not isinstance(section, dict):
                logger.error("Cannot set '%s': '%s' is not a section.", key_path, key)
                return False

        try:
            value = _coerce(value, section.get(keys[-1]))
        except (ValueError, TypeError) as e:
            logger.error("Invalid value for '%s': %s", key_path, e)
            return False

        section[keys[-1]] = value
        logger.info("Configuration updated: %s = %s", key_path, value)
        return True

    def reset(self):
        """Rebuilds the configuration from the defaults and settings.json."""
        config = copy.deepcopy(DEFAULTS)
        config_path = PathUtils.get_settings_file()
        try:
            if config_path.exists():
                with open(config_path, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    _merge(config, loaded)
                else:
                    logger.warning("Ignoring %s: expected a JSON object.", config_path)
            else:
                logger.warning("settings.json not found at %s. Using defaults.", config_path)
        except (OSError, ValueError) as e:
            logger.error("Failed to load settings.json, using defaults: %s", e)
        self._config = config


# The global singleton instance that the entire application will use.
config_manager = ConfigManager()
