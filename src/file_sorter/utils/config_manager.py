"""
Configuration management for the file sorter.
Handles loading, validation, and merging of configurations from multiple sources.
"""

import os
import json
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "FILE_SORTER_"


class ConfigManager:
    """Manage configuration from defaults, files, environment variables and overrides."""

    def __init__(
        self,
        config_file: Optional[Path] = None,
        overrides: Optional[Dict[str, Any]] = None,
        load_env_file: bool = True,
    ):
        """
        Initialize configuration manager.

        Args:
            config_file: Optional path to a JSON or YAML configuration file
            overrides: Optional dotted-path overrides (e.g. {"daemon.interval": 5})
            load_env_file: Whether to read a .env file before the environment
        """
        self.config = self._load_default_config()

        if config_file:
            config_file = Path(config_file)
            if not config_file.exists():
                raise ValueError(f"Configuration file not found: {config_file}")
            self._load_from_file(config_file)

        if load_env_file:
            load_dotenv(find_dotenv(usecwd=True))
        self._load_from_env()

        if overrides:
            for path, value in overrides.items():
                if value is not None:
                    self.set(path, value)

        self._validate_config()

        logger.debug("Configuration loaded successfully")

    def _load_default_config(self) -> Dict[str, Any]:
        """Load default configuration."""
        return {
            "rules": {
                "rules_file": "rules.json",
                "script_file": "sort_rules.lua",
                "enable_scripts": True,
            },
            "sorting": {
                "conflict_strategy": "fail",  # 'fail' or 'rename'
                "dry_run": False,
            },
            "daemon": {
                "interval": 10,  # seconds
            },
            "service": {
                "name": "file_sorter",
                "unit_dir": "/etc/systemd/system",
                "task_name": "FileSorterDaemon",
            },
            "logging": {
                "level": "INFO",
                "file": None,
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
        }

    def _load_from_file(self, config_file: Path):
        """Load configuration from file."""
        logger.info(f"Loading configuration from {config_file}")

        with open(config_file, "r") as f:
            if config_file.suffix == ".json":
                file_config = json.load(f)
            elif config_file.suffix in (".yaml", ".yml"):
                file_config = yaml.safe_load(f)
            else:
                raise ValueError(f"Unsupported config file format: {config_file}")

        if file_config is None:
            return
        if not isinstance(file_config, dict):
            raise ValueError(f"Configuration file must contain a mapping: {config_file}")

        # Deep merge with default config
        self._deep_merge(self.config, file_config)

    def _load_from_env(self):
        """Load variables with the FILE_SORTER_ prefix, '__' separating levels."""
        for key, value in os.environ.items():
            if key.startswith(ENV_PREFIX):
                config_path = key[len(ENV_PREFIX) :].lower().split("__")
                self._set_nested_config(self.config, config_path, value)

    def _deep_merge(self, base: Dict[str, Any], update: Dict[str, Any]):
        """Deep merge update dictionary into base dictionary."""
        for key, value in update.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _set_nested_config(
        self, config_dict: Dict[str, Any], path: List[str], value: Any
    ):
        """Set a value in a nested dictionary using a path."""
        # Convert value to appropriate type if it's a string
        if isinstance(value, str):
            if value.lower() in ("true", "false"):
                value = value.lower() == "true"
            elif value.isdigit():
                value = int(value)
            elif value.replace(".", "", 1).isdigit() and value.count(".") == 1:
                value = float(value)

        current = config_dict
        for part in path[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]
        current[path[-1]] = value

    def _validate_config(self):
        """Validate configuration values."""
        errors = []

        if self.config["sorting"]["conflict_strategy"] not in ["fail", "rename"]:
            errors.append("conflict_strategy must be 'fail' or 'rename'")

        interval = self.config["daemon"]["interval"]
        if not isinstance(interval, (int, float)) or isinstance(interval, bool):
            errors.append("daemon interval must be a number")
        elif interval < 1:
            errors.append("daemon interval must be >= 1")

        if not self.config["rules"]["rules_file"]:
            errors.append("rules_file must be set")

        if not self.config["service"]["name"]:
            errors.append("service name must be set")

        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if str(self.config["logging"]["level"]).upper() not in valid_log_levels:
            errors.append(f"logging level must be one of {valid_log_levels}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def get(self, path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            path: Configuration path (e.g., 'daemon.interval')
            default: Default value if path not found

        Returns:
            Configuration value or default
        """
        parts = path.split(".")
        current = self.config

        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default

        return current

    def set(self, path: str, value: Any):
        """
        Set configuration value using dot notation.

        Args:
            path: Configuration path (e.g., 'daemon.interval')
            value: Value to set
        """
        parts = path.split(".")
        current = self.config

        for part in parts[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]

        current[parts[-1]] = value
