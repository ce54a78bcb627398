"""
Configuration Loader
Loads POS configuration from various sources
"""

import json
import os
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, Optional, Union

from shoppro_pos.config.pos_config import (
    PosConfig,
    ENV_VAR_MAPPING,
    ConfigDefaults,
)
from shoppro_pos.config.config_validator import ConfigValidator
from shoppro_pos.exceptions import ConfigError


class ConfigLoader:
    """
    ConfigLoader class
    Provides multiple ways to load and merge configuration
    """

    def __init__(self) -> None:
        self._validator = ConfigValidator()

    def from_file(self, path: Union[str, Path]) -> Dict[str, Any]:
        """
        Load configuration from a JSON file

        Args:
            path: Path to JSON configuration file

        Returns:
            Loaded configuration dictionary

        Raises:
            ConfigError: If file not found or invalid JSON
        """
        file_path = Path(path).resolve()

        if not file_path.exists():
            raise ConfigError(
                f"Configuration file not found: {file_path}",
                code="CONFIG_FILE_NOT_FOUND"
            )

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in configuration file: {file_path}",
                code="CONFIG_PARSE_ERROR"
            ) from e

    def from_environment(self) -> Dict[str, Any]:
        """
        Load configuration from environment variables

        Returns:
            Configuration dictionary from environment variables
        """
        config: Dict[str, Any] = {}

        for env_var, config_key in ENV_VAR_MAPPING.items():
            value = os.environ.get(env_var)
            if value is not None and value != "":
                config[config_key] = self._parse_env_value(config_key, value)

        return config

    def from_dict(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of a programmatic configuration dictionary"""
        return config.copy()

    def merge(self, *sources: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge multiple configuration sources
        Priority: later sources override earlier sources

        Args:
            sources: Configuration dictionaries in order of increasing priority

        Returns:
            Merged configuration dictionary
        """
        merged: Dict[str, Any] = {}

        for source in sources:
            filtered = self._filter_none(source)
            merged.update(filtered)

        return merged

    def resolve(self, config: Dict[str, Any]) -> PosConfig:
        """
        Resolve configuration with defaults and validation

        Raises:
            ValidationError: If configuration is invalid
        """
        self._validator.validate_or_raise(config)

        # Pydantic fills in defaults
        return PosConfig(**config)

    def load(
        self,
        file: Optional[Union[str, Path]] = None,
        env: bool = True,
        config: Optional[Dict[str, Any]] = None,
    ) -> PosConfig:
        """
        Load, merge, and resolve configuration from multiple sources

        Args:
            file: Path to JSON configuration file (optional)
            env: Whether to load from environment variables (default: True)
            config: Programmatic configuration dictionary (optional)

        Returns:
            Fully resolved PosConfig object
        """
        sources: list[Dict[str, Any]] = []

        if file is not None:
            sources.append(self.from_file(file))

        if env:
            sources.append(self.from_environment())

        if config is not None:
            sources.append(config)

        merged = self.merge(*sources)
        return self.resolve(merged)

    def create_template(self, path: Union[str, Path]) -> None:
        """
        Create a configuration template file

        Args:
            path: Path to write template
        """
        template = {
            "base_url": "http://localhost:5000",
            "api_token": "",
            "timeout": ConfigDefaults.TIMEOUT,
            "retry_attempts": ConfigDefaults.RETRY_ATTEMPTS,
            "retry_delay": ConfigDefaults.RETRY_DELAY,
            "enable_audit_log": ConfigDefaults.ENABLE_AUDIT_LOG,
            "currency_symbol": ConfigDefaults.CURRENCY_SYMBOL,
            "service_charge": float(ConfigDefaults.SERVICE_CHARGE),
            "tax_rate": float(ConfigDefaults.TAX_RATE),
            "low_stock_threshold": ConfigDefaults.LOW_STOCK_THRESHOLD,
            "credit_limit_default": float(ConfigDefaults.CREDIT_LIMIT),
        }

        file_path = Path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(template, f, indent=2)

    def _parse_env_value(self, key: str, value: str) -> Any:
        """Parse environment variable value to appropriate type"""
        if key == "enable_audit_log":
            return value.lower() in ("true", "1", "yes")

        if key in ("timeout", "retry_attempts", "retry_delay", "low_stock_threshold"):
            try:
                return int(value)
            except ValueError:
                return value

        if key in ("service_charge", "tax_rate", "credit_limit_default"):
            try:
                return Decimal(value)
            except InvalidOperation:
                return value

        return value

    def _filter_none(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Filter out None values from config dictionary"""
        return {k: v for k, v in config.items() if v is not None}
