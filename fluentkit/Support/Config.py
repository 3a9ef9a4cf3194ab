from __future__ import annotations

from typing import Any, Dict, List, Optional
import importlib
import json
import os
import pkgutil
from types import ModuleType

from fluentkit.Iterable.Arr import Arr


class ConfigRepository:
    """Laravel-style configuration repository."""

    def __init__(self, package: str = 'fluentkit.config') -> None:
        self._package = package
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from the config package modules."""
        package = importlib.import_module(self._package)

        for module_info in pkgutil.iter_modules(package.__path__):
            module_name = module_info.name
            module = importlib.import_module(f"{self._package}.{module_name}")

            # Get all non-private attributes
            config_data = {
                key: value for key, value in vars(module).items()
                if not key.startswith('_') and not callable(value) and not isinstance(value, ModuleType)
            }

            self._config[module_name] = self._process_env_variables(config_data)

    def _process_env_variables(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Convert raw environment strings found in config data."""
        def process_value(value: Any) -> Any:
            if isinstance(value, str):
                return self._convert_env_value(value)
            elif isinstance(value, dict):
                return {k: process_value(v) for k, v in value.items()}
            elif isinstance(value, list):
                return [process_value(item) for item in value]
            return value

        return {k: process_value(v) for k, v in config_data.items()}

    @staticmethod
    def _convert_env_value(value: str) -> Any:
        """Convert environment variable string to appropriate type."""
        # Boolean values
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        # None/null values
        if value.lower() in ('null', 'none'):
            return None

        # Numeric values
        try:
            if '.' in value:
                return float(value)
            else:
                return int(value)
        except ValueError:
            pass

        # JSON values
        if value.startswith(('{', '[')):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def get(self, key: Optional[str], default: Any = None) -> Any:
        """Get a configuration value using dot notation."""
        return Arr.get(self._config, key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value using dot notation."""
        Arr.set(self._config, key, value)

    def has(self, key: str) -> bool:
        """Check if a configuration key exists."""
        return Arr.has(self._config, key)

    def all(self) -> Dict[str, Any]:
        """Get all configuration."""
        return self._config.copy()

    def forget(self, key: str) -> None:
        """Remove a configuration value."""
        Arr.forget(self._config, key)

    def get_many(self, keys: List[str]) -> Dict[str, Any]:
        """Get multiple configuration values at once."""
        return {key: self.get(key) for key in keys}


_repository: Optional[ConfigRepository] = None


def repository() -> ConfigRepository:
    """Get the shared configuration repository."""
    global _repository
    if _repository is None:
        _repository = ConfigRepository()
    return _repository


def config(key: Optional[str] = None, default: Any = None) -> Any:
    """Get a configuration value, or the repository when no key is given."""
    if key is None:
        return repository()
    return repository().get(key, default)


def env(key: str, default: Any = None) -> Any:
    """Get environment variable with type conversion."""
    value = os.getenv(key)
    if value is None:
        return default

    if value == '':
        return None

    return ConfigRepository._convert_env_value(value)


__all__ = ["ConfigRepository", "repository", "config", "env"]
