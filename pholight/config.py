"""
PhoLight - Configuration Manager
=================================
Handles loading of server configuration from three layers, later ones
winning:

1. DEFAULTS     - Built-in values matching the classic setup (port 3000)
2. config.yaml  - Optional settings file in the project directory
3. Environment  - PHOLIGHT_* variables (a .env file is loaded by app.py)

Usage:
    config = ConfigManager(project_dir="/path/to/pholight")
    settings = config.load()           # Returns merged config dict
    config.update({"web": {...}})      # Updates config.yaml
"""

import logging
import os
from typing import Any

import yaml


logger = logging.getLogger("pholight.config")


# Default configuration values used when config.yaml is missing or incomplete.
DEFAULTS = {
    "web": {
        "host": "0.0.0.0",
        "port": 3000,
        "client_dir": "client",
        "ws_path": "/",
    },
    "auth": {
        "password_hours": 24,
        "exclusive_host": False,
    },
}

# Environment variable -> (section, key, parser)
ENV_OVERRIDES = {
    "PHOLIGHT_HOST": ("web", "host", str),
    "PHOLIGHT_PORT": ("web", "port", int),
    "PHOLIGHT_PASSWORD_HOURS": ("auth", "password_hours", float),
    "PHOLIGHT_EXCLUSIVE_HOST": ("auth", "exclusive_host", "bool"),
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class ConfigManager:
    """
    Configuration manager for PhoLight.

    Attributes:
        project_dir: Root directory of the PhoLight project.
        config_path: Full path to config.yaml.
    """

    def __init__(self, project_dir: str, environ: dict[str, str] | None = None):
        """
        Initialize the config manager.

        Args:
            project_dir: Absolute path to the project root directory.
            environ:     Environment mapping to read overrides from.
                         Defaults to os.environ.
        """
        self.project_dir = project_dir
        self.config_path = os.path.join(project_dir, "config.yaml")
        self._environ = environ if environ is not None else os.environ

    def load(self) -> dict:
        """
        Load and merge configuration from defaults, config.yaml and env.

        A corrupted config.yaml is not fatal: defaults are used and the
        error text is stored under "_config_error".

        Returns:
            A dictionary containing the full configuration.
        """
        config = self._load_file()
        self._apply_env(config)
        return config

    def _load_file(self) -> dict:
        """Defaults merged with config.yaml, without environment overrides."""
        config = _deep_copy(DEFAULTS)

        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    user_config = yaml.safe_load(f) or {}
                if not isinstance(user_config, dict):
                    raise yaml.YAMLError("top level of config.yaml must be a mapping")
                _deep_merge(config, user_config)
            except (yaml.YAMLError, OSError) as e:
                logger.warning(f"Ignoring config.yaml: {e}")
                config["_config_error"] = str(e)

        return config

    def save(self, config: dict) -> None:
        """
        Save configuration back to config.yaml.

        Only the known sections are written. Internal keys (prefixed with
        '_') are dropped.
        """
        clean = {}
        for section in DEFAULTS:
            if section in config:
                clean[section] = config[section]

        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.dump(
                clean,
                f,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
            )

    def update(self, updates: dict) -> dict:
        """
        Partially update config.yaml and save.

        Environment overrides are not written back; they stay temporary.

        Returns:
            The updated file configuration (defaults + config.yaml).
        """
        config = self._load_file()
        _deep_merge(config, updates)
        self.save(config)
        return config

    def client_dir(self, config: dict) -> str:
        """Resolve web.client_dir against the project directory."""
        path = config["web"].get("client_dir") or DEFAULTS["web"]["client_dir"]
        return path if os.path.isabs(path) else os.path.join(self.project_dir, path)

    def _apply_env(self, config: dict) -> None:
        for var, (section, key, parser) in ENV_OVERRIDES.items():
            raw = self._environ.get(var)
            if raw is None or raw == "":
                continue
            try:
                value = _parse_bool(raw) if parser == "bool" else parser(raw)
            except ValueError:
                logger.warning(f"Ignoring {var}={raw!r}: not a valid {key}")
                continue
            config.setdefault(section, {})[key] = value


# -- Helper Functions ---------------------------------------------------------

def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(value)


def _deep_copy(d: dict) -> dict:
    """Create a deep copy of a nested dictionary."""
    result = {}
    for key, value in d.items():
        if isinstance(value, dict):
            result[key] = _deep_copy(value)
        elif isinstance(value, list):
            result[key] = list(value)
        else:
            result[key] = value
    return result


def _deep_merge(base: dict, override: dict[str, Any]) -> None:
    """
    Recursively merge 'override' into 'base' (in-place).

    For nested dicts, values are merged recursively.
    For all other types, override replaces base.
    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
