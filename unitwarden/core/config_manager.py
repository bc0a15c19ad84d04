"""Configuration manager for loading unitwarden settings."""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..models.options import HardeningOptions
from ..utils.constants import (
    CONFIG_ENV_VAR,
    CONFIG_FILE,
    DEFAULT_HARDENING_MODE,
    DEFAULT_LOG_LEVEL,
    HARDENING_MODES,
)

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: Dict[str, Any] = {
    "systemctl_command": "systemctl",
    "journalctl_command": "journalctl",
    "tracer_executable": None,  # Default: the running unitwarden program
    "log_level": DEFAULT_LOG_LEVEL,
    "log_file": None,
    "hardening": {
        "mode": DEFAULT_HARDENING_MODE,
        "network_firewalling": False,
        "filesystem_whitelisting": False,
        "merge_paths_threshold": None,
    },
}


class ConfigManager:
    """Manages unitwarden configuration."""

    def __init__(self, config_file: Optional[Path] = None):
        """Initialize the config manager.

        Args:
            config_file: Config file path, defaults to $UNITWARDEN_CONFIG or /etc/unitwarden/config.yaml
        """
        if config_file is None:
            config_file = Path(os.environ.get(CONFIG_ENV_VAR, CONFIG_FILE))
        self.config_file = Path(config_file)
        self.settings: Dict[str, Any] = {}
        self._load_defaults()

    def load_config(self) -> bool:
        """Load configuration from file.

        Returns:
            True if config loaded successfully, False otherwise
        """
        if not self.config_file.exists():
            logger.debug(f"Config file {self.config_file} not found, using defaults")
            self._load_defaults()
            return False

        try:
            with open(self.config_file, 'r') as f:
                data = yaml.safe_load(f)

            if not data:
                logger.warning("Empty config file, using defaults")
                self._load_defaults()
                return False

            if not self._validate_config(data):
                logger.error("Invalid config file, using defaults")
                self._load_defaults()
                return False

            self.settings = data
            self._ensure_default_settings()

            logger.debug(f"Loaded config from {self.config_file}")
            return True

        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error: {e}")
            self._load_defaults()
            return False
        except OSError as e:
            logger.error(f"Failed to load config: {e}")
            self._load_defaults()
            return False

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a setting value.

        Args:
            key: Setting key
            default: Default value if key not found

        Returns:
            Setting value or default
        """
        return self.settings.get(key, default)

    def get_hardening_options(self) -> HardeningOptions:
        """Get the default hardening options from the config.

        Returns:
            HardeningOptions instance
        """
        return HardeningOptions.from_dict(self.settings.get("hardening", {}))

    def _validate_config(self, data: Any) -> bool:
        """Validate configuration data structure.

        Args:
            data: Configuration data

        Returns:
            True if valid, False otherwise
        """
        if not isinstance(data, dict):
            logger.error("Config must be a dictionary")
            return False

        if "hardening" in data and not isinstance(data["hardening"], dict):
            logger.error("Hardening settings must be a dictionary")
            return False

        hardening = data.get("hardening", {})
        if hardening.get("mode", DEFAULT_HARDENING_MODE) not in HARDENING_MODES:
            logger.error(f"Invalid hardening mode: {hardening['mode']}")
            return False

        for key in ("network_firewalling", "filesystem_whitelisting"):
            if not isinstance(hardening.get(key, False), bool):
                logger.error(f"Hardening setting {key} must be true or false")
                return False

        # bool is an int subclass, reject it explicitly
        threshold = hardening.get("merge_paths_threshold")
        if threshold is not None and (isinstance(threshold, bool) or not isinstance(threshold, int)
                                      or threshold < 1):
            logger.error("Hardening setting merge_paths_threshold must be a positive integer")
            return False

        return True

    def _load_defaults(self):
        """Load default configuration."""
        self.settings = {}
        self._ensure_default_settings()

    def _ensure_default_settings(self):
        """Ensure all default settings exist."""
        for key, value in DEFAULT_SETTINGS.items():
            if key not in self.settings:
                self.settings[key] = copy.deepcopy(value)

        for key, value in DEFAULT_SETTINGS["hardening"].items():
            if key not in self.settings["hardening"]:
                self.settings["hardening"][key] = value
