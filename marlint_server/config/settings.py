"""
Configuration management for the marlint language server.
Centralizes logging settings and the linting module contract.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_CONFIG_PATH = "~/.marlint/config/server.json"

DEFAULT_CONFIG = {
    "logging": {
        "level": "INFO",
        "format": "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
        "logs_dir": "~/.marlint/logs",
    },
    "linter": {
        "module_name": "marlint",
        "entry_point": "lint_text",
        "source_name": "Marlint",
        "manifest_name": "package.json",
    },
}


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str
    format: str
    logs_dir: str


@dataclass
class LinterConfig:
    """Contract of the external linting module."""

    # Import name looked up in the workspace
    module_name: str

    # Callable the module must expose
    entry_point: str

    # Value of Diagnostic.source
    source_name: str

    # Dependency manifest file at the workspace root
    manifest_name: str


@dataclass
class LinterSettings:
    """Per-session settings sent by the editor.

    Received in ``initializationOptions`` and again under the ``marlint`` key
    of ``workspace/didChangeConfiguration``.
    """

    module_path: Optional[str] = None
    show_warnings: bool = True
    options: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_client(cls, payload: Optional[Dict[str, Any]]) -> "LinterSettings":
        """Build settings from the camelCase payload an editor sends."""
        if not payload:
            return cls()

        module_path = payload.get("modulePath") or None
        show_warnings = payload.get("showWarnings", True)
        options = payload.get("options") or {}
        if not isinstance(options, dict):
            options = {}

        return cls(
            module_path=os.path.expanduser(module_path) if module_path else None,
            show_warnings=bool(show_warnings),
            options=dict(options),
        )


class Config:
    """Main configuration class."""

    def __init__(self, config_file: Optional[str] = None):
        """Initialize configuration from JSON file, falling back to defaults."""
        self.config_file = config_file or os.getenv("MARLINT_SERVER_CONFIG")

        if not self.config_file:
            self.config_file = os.path.expanduser(DEFAULT_CONFIG_PATH)

        self._load_config()

    def _expand_paths_in_config(self, config_dict: dict) -> dict:
        """Recursively expand tilde paths in configuration dictionary."""
        expanded_config = {}
        for key, value in config_dict.items():
            if isinstance(value, str):
                if value.startswith("~/"):
                    expanded_config[key] = str(Path.home() / value[2:])
                else:
                    expanded_config[key] = value
            elif isinstance(value, dict):
                expanded_config[key] = self._expand_paths_in_config(value)
            else:
                expanded_config[key] = value
        return expanded_config

    def _read_config_file(self) -> dict:
        """Read the JSON config file, or an empty dict when it does not exist."""
        if not os.path.exists(self.config_file):
            return {}

        with open(self.config_file, "r", encoding="utf-8") as f:
            return json.load(f)

    def _load_config(self) -> None:
        """Load configuration, layering the file over the built-in defaults."""
        try:
            config_data = self._read_config_file()

            # Merge section by section so a partial file keeps the other keys
            merged = {}
            for section, defaults in DEFAULT_CONFIG.items():
                merged[section] = {**defaults, **config_data.get(section, {})}

            merged = self._expand_paths_in_config(merged)

            self.logging = LoggingConfig(**merged["logging"])
            self.linter = LinterConfig(**merged["linter"])

        except Exception as e:
            raise ValueError(f"Failed to load config file {self.config_file}: {e}")


# Global configuration instance (lazy initialization)
_config_instance = None


def get_config(force_reload: bool = False) -> Config:
    """Get the global configuration instance."""
    global _config_instance
    if _config_instance is None or force_reload:
        _config_instance = Config()
    return _config_instance


def reload_config() -> None:
    """Reload the configuration by resetting the global instance."""
    global _config_instance
    _config_instance = None
    get_config(force_reload=True)


# Create a lazy config object
class _ConfigProxy:
    def __getattr__(self, name):
        return getattr(get_config(), name)


config = _ConfigProxy()
