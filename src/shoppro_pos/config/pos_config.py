"""
POS Configuration Types and Schema
Type-safe configuration objects for the POS engine and backend client
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ConfigDefaults:
    """Default configuration values"""
    TIMEOUT = 30000
    RETRY_ATTEMPTS = 3
    RETRY_DELAY = 1000
    ENABLE_AUDIT_LOG = True
    CURRENCY_SYMBOL = "RS"
    SERVICE_CHARGE = Decimal("20")
    TAX_RATE = Decimal("0.05")
    LOW_STOCK_THRESHOLD = 5
    CREDIT_LIMIT = Decimal("50000")


# Environment variable mapping
ENV_VAR_MAPPING = {
    "POS_BASE_URL": "base_url",
    "POS_API_TOKEN": "api_token",
    "POS_TIMEOUT": "timeout",
    "POS_RETRY_ATTEMPTS": "retry_attempts",
    "POS_RETRY_DELAY": "retry_delay",
    "POS_ENABLE_AUDIT_LOG": "enable_audit_log",
    "POS_CURRENCY_SYMBOL": "currency_symbol",
    "POS_SERVICE_CHARGE": "service_charge",
    "POS_TAX_RATE": "tax_rate",
    "POS_LOW_STOCK_THRESHOLD": "low_stock_threshold",
    "POS_CREDIT_LIMIT_DEFAULT": "credit_limit_default",
}


class PosConfig(BaseModel):
    """
    Main POS configuration class

    Holds the backend connection settings and the shop's pricing constants.
    The pricing constants default to the values the shop has always used
    (flat service charge of 20, tax at 5%).
    """

    # Required - Backend location
    base_url: str = Field(
        ...,
        description="Base URL of the shop backend REST API",
        min_length=1
    )
    api_token: Optional[str] = Field(
        default=None,
        description="Bearer token sent with every request"
    )

    # Optional - Transport settings
    timeout: int = Field(
        default=ConfigDefaults.TIMEOUT,
        description="Request timeout in milliseconds",
        ge=1000,
        le=300000
    )
    retry_attempts: int = Field(
        default=ConfigDefaults.RETRY_ATTEMPTS,
        description="Number of retry attempts",
        ge=0,
        le=10
    )
    retry_delay: int = Field(
        default=ConfigDefaults.RETRY_DELAY,
        description="Base delay between retries in milliseconds",
        ge=1,
        le=60000
    )
    enable_audit_log: bool = Field(
        default=ConfigDefaults.ENABLE_AUDIT_LOG,
        description="Enable HTTP audit logging"
    )

    # Optional - Pricing
    currency_symbol: str = Field(
        default=ConfigDefaults.CURRENCY_SYMBOL,
        description="Currency prefix used in notices and receipts"
    )
    service_charge: Decimal = Field(
        default=ConfigDefaults.SERVICE_CHARGE,
        description="Flat service charge added to every sale",
        ge=0
    )
    tax_rate: Decimal = Field(
        default=ConfigDefaults.TAX_RATE,
        description="Tax rate applied after the global discount",
        ge=0,
        le=1
    )
    low_stock_threshold: int = Field(
        default=ConfigDefaults.LOW_STOCK_THRESHOLD,
        description="Remaining stock below which a low-stock notice is raised",
        ge=0
    )
    credit_limit_default: Decimal = Field(
        default=ConfigDefaults.CREDIT_LIMIT,
        description="Credit limit assigned to new permanent customers",
        ge=0
    )

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate base_url is a valid URL"""
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must be a valid HTTP/HTTPS URL")
        return v.rstrip("/")

