"""Configuration loader module."""

import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, Union

import yaml
from dotenv import load_dotenv

from .base import Config, ConfigurationError, Environment


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# environment variable -> (config section, key, converter)
ENV_OVERRIDES: Dict[str, Tuple[str, str, Callable[[str], Any]]] = {
    "SERVICE_NAME": ("service", "name", str),
    "REFRESH_INTERVAL": ("refresh", "interval_minutes", float),
    "ENABLE_CACHE_TRIGGER": ("refresh", "enable_manual_trigger", _as_bool),
    "INSTANCE_DELAY": ("refresh", "startup_delay", float),
    "RANDOMIZE_INSTANCE_DELAY": ("refresh", "randomize_startup_delay", _as_bool),
    "FETCH_TIMEOUT": ("fetch", "timeout", float),
    "SYNONYMS_PATH": ("synonyms", "path", str),
    "LOG_LEVEL": ("monitoring", "log_level", str),
    "METRICS_PORT": ("monitoring", "metrics_port", int),
}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two configuration dictionaries, override wins."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Configuration loader class."""

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """Initialize configuration loader.

        Args:
            config_dir: Directory containing configuration files.
                Defaults to current directory.
        """
        self.config_dir = Path(config_dir or os.getcwd())

        # Load environment variables from .env file
        env_file = self.config_dir / ".env"
        if env_file.exists():
            load_dotenv(env_file)

    def load(self, env: Optional[Environment] = None) -> Config:
        """Load configuration.

        Args:
            env: Environment to load configuration for.
                Defaults to environment from ENVIRONMENT variable.

        Returns:
            Loaded configuration.

        Raises:
            ConfigurationError: If configuration loading fails.
        """
        try:
            env = env or Environment(
                os.getenv("ENVIRONMENT", Environment.DEVELOPMENT.value)
            )
        except ValueError as e:
            raise ConfigurationError(f"Unknown environment: {e}")

        config_data = self._load_config_files(env)
        config_data = deep_merge(config_data, self._load_env_overrides())
        config_data.setdefault("service", {})["environment"] = env.value

        return Config.from_dict(config_data)

    def _load_config_files(self, env: Environment) -> Dict:
        """Load base and environment configuration files.

        Args:
            env: Environment to load configuration for.

        Returns:
            Configuration data.
        """
        base_config = self._load_file("config.yaml") or self._load_file("config.json")
        env_config = self._load_file(f"config.{env.value}.yaml")
        return deep_merge(base_config, env_config)

    def _load_env_overrides(self) -> Dict:
        """Collect configuration overrides from environment variables.

        Raises:
            ConfigurationError: If a variable holds an invalid value.
        """
        overrides: Dict[str, Dict[str, Any]] = {}
        for name, (section, key, convert) in ENV_OVERRIDES.items():
            value = os.getenv(name)
            if value is None or value == "":
                continue
            try:
                overrides.setdefault(section, {})[key] = convert(value)
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {name}: {e}")
        return overrides

    def _load_file(self, filename: str) -> Dict:
        """Load configuration file.

        Args:
            filename: Name of file to load.

        Returns:
            Configuration data.

        Raises:
            ConfigurationError: If file loading fails.
        """
        path = self.config_dir / filename
        if not path.exists():
            return {}

        try:
            with open(path) as f:
                if path.suffix in (".yaml", ".yml"):
                    data = yaml.safe_load(f) or {}
                elif path.suffix == ".json":
                    data = json.load(f)
                else:
                    raise ValueError("Unsupported file format")
        except Exception as e:
            raise ConfigurationError(f"Failed to load {filename}: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {filename} must hold a mapping")
        return data


def get_config(
    env: Optional[Environment] = None,
    config_dir: Optional[Union[str, Path]] = None,
) -> Config:
    """Get configuration.

    This is a convenience function that creates a loader
    and loads configuration in one step.

    Args:
        env: Environment to load configuration for.
            Defaults to environment from ENVIRONMENT variable.
        config_dir: Directory containing configuration files.
            Defaults to current directory.

    Returns:
        Loaded configuration.

    Raises:
        ConfigurationError: If configuration loading fails.
    """
    loader = ConfigLoader(config_dir)
    return loader.load(env)
