"""
Configuration Manager

Loads pacing profiles from YAML or JSON files, applies command-line
overrides and validates the result.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from ratebatch.core.config.models import AppConfig, PacingConfig
from ratebatch.core.exceptions import ConfigurationError, ErrorCode


logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Manages application configuration with layered loading and validation.

    Configuration sources in order of precedence:
    1. CLI overrides (highest priority)
    2. Configuration file
    3. Default values (lowest priority)
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Optional path to configuration file
        """
        self.config_file = Path(config_file) if config_file else None
        self._config: Optional[AppConfig] = None
        self._config_paths = self._get_default_config_paths()

    def _get_default_config_paths(self) -> List[Path]:
        """Get default configuration file search paths."""
        return [
            Path.cwd() / "ratebatch.yaml",
            Path.cwd() / "ratebatch.yml",
            Path.cwd() / ".ratebatch.yaml",
            Path.home() / ".config" / "ratebatch" / "config.yaml",
        ]

    @property
    def config(self) -> AppConfig:
        """Loaded configuration, loading defaults on first access."""
        if self._config is None:
            return self.load_config()
        return self._config

    def load_config(self, overrides: Optional[Dict[str, Any]] = None) -> AppConfig:
        """
        Load and validate configuration from all sources.

        Args:
            overrides: Nested dictionary merged over the file contents

        Returns:
            Validated AppConfig instance

        Raises:
            ConfigurationError: If configuration is invalid
        """
        config_data: Dict[str, Any] = {}

        file_config = self._load_config_file()
        if file_config:
            config_data.update(file_config)

        if overrides:
            config_data = self._deep_merge(config_data, overrides)

        try:
            self._config = AppConfig(**config_data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Configuration validation failed: {e}",
                error_code=ErrorCode.CONFIG_SCHEMA_VALIDATION,
                cause=e
            ) from e
        return self._config

    def get_profile(self, name: Optional[str] = None) -> PacingConfig:
        """
        Get a pacing profile by name.

        Raises:
            ConfigurationError: If the profile does not exist
        """
        try:
            return self.config.get_profile(name)
        except KeyError as e:
            raise ConfigurationError(
                str(e.args[0]),
                error_code=ErrorCode.CONFIG_MISSING_REQUIRED,
                config_key="profile",
                config_value=name
            ) from e

    def _load_config_file(self) -> Optional[Dict[str, Any]]:
        """Load configuration from file."""
        config_file = self.config_file

        if config_file is not None and not config_file.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_file}",
                error_code=ErrorCode.CONFIG_FILE_NOT_FOUND,
                config_key="config_file",
                config_value=str(config_file)
            )

        if config_file is None:
            for path in self._config_paths:
                if path.exists() and path.is_file():
                    config_file = path
                    break

        if config_file is None:
            return None

        logger.debug(f"Loading configuration from {config_file}")
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                if config_file.suffix.lower() == '.json':
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f) or {}
        except (IOError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Failed to load config file {config_file}: {e}",
                error_code=ErrorCode.CONFIG_INVALID_FORMAT,
                cause=e
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file {config_file} must contain a mapping at the top level",
                error_code=ErrorCode.CONFIG_INVALID_FORMAT
            )
        return data

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
