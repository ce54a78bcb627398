"""
Configuration module
"""

from shoppro_pos.config.pos_config import (
    PosConfig,
    ENV_VAR_MAPPING,
    ConfigDefaults,
)
from shoppro_pos.config.config_loader import ConfigLoader
from shoppro_pos.config.config_validator import (
    ConfigValidator,
    ValidationResult,
    ValidationErrorDetail,
)

__all__ = [
    "PosConfig",
    "ENV_VAR_MAPPING",
    "ConfigDefaults",
    "ConfigLoader",
    "ConfigValidator",
    "ValidationResult",
    "ValidationErrorDetail",
]
