"""
Configuration Validator
Validates POS configuration with clear error messages
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional


@dataclass
class ValidationErrorDetail:
    """Validation error detail"""
    field: str
    message: str
    value: Optional[Any] = None


@dataclass
class ValidationResult:
    """Validation result"""
    valid: bool
    errors: List[ValidationErrorDetail] = field(default_factory=list)


class ConfigValidator:
    """
    ConfigValidator class
    Provides comprehensive validation for POS configuration
    """

    def __init__(self) -> None:
        self._errors: List[ValidationErrorDetail] = []

    def validate(self, config: Dict[str, Any]) -> ValidationResult:
        """
        Validate the entire configuration dictionary

        Args:
            config: Configuration dictionary to validate

        Returns:
            ValidationResult with any errors
        """
        self._errors = []

        self._validate_required(config)
        self._validate_formats(config)
        self._validate_ranges(config)
        self._validate_pricing(config)

        return ValidationResult(
            valid=len(self._errors) == 0,
            errors=self._errors.copy()
        )

    def validate_or_raise(self, config: Dict[str, Any]) -> None:
        """
        Validate and raise if invalid

        Args:
            config: Configuration dictionary to validate

        Raises:
            ValidationError: If configuration is invalid
        """
        from shoppro_pos.exceptions import ValidationError

        result = self.validate(config)
        if not result.valid:
            error_messages = "; ".join(
                f"{e.field}: {e.message}" for e in result.errors
            )
            raise ValidationError(
                f"Configuration validation failed: {error_messages}",
                code="VAL_CONFIG",
            )

    def _validate_required(self, config: Dict[str, Any]) -> None:
        """Validate required fields are present and non-empty"""
        value = config.get("base_url")
        if value is None:
            self._errors.append(ValidationErrorDetail(
                field="base_url",
                message="base_url is required"
            ))
        elif isinstance(value, str) and value.strip() == "":
            self._errors.append(ValidationErrorDetail(
                field="base_url",
                message="base_url cannot be empty",
                value=value
            ))

    def _validate_formats(self, config: Dict[str, Any]) -> None:
        """Validate field formats"""
        base_url = config.get("base_url")
        if isinstance(base_url, str) and base_url.strip() != "":
            if not base_url.startswith(("http://", "https://")):
                self._errors.append(ValidationErrorDetail(
                    field="base_url",
                    message="base_url must be a valid HTTP/HTTPS URL",
                    value=base_url
                ))

        api_token = config.get("api_token")
        if api_token is not None and not isinstance(api_token, str):
            self._errors.append(ValidationErrorDetail(
                field="api_token",
                message="api_token must be a string",
                value="[REDACTED]"
            ))

    def _validate_ranges(self, config: Dict[str, Any]) -> None:
        """Validate numeric ranges"""
        timeout = config.get("timeout")
        if timeout is not None:
            if not isinstance(timeout, (int, float)) or timeout <= 0:
                self._errors.append(ValidationErrorDetail(
                    field="timeout",
                    message="timeout must be a positive number (milliseconds)",
                    value=timeout
                ))
            elif timeout < 1000:
                self._errors.append(ValidationErrorDetail(
                    field="timeout",
                    message="timeout should be at least 1000ms for reliable operation",
                    value=timeout
                ))
            elif timeout > 300000:
                self._errors.append(ValidationErrorDetail(
                    field="timeout",
                    message="timeout should not exceed 300000ms (5 minutes)",
                    value=timeout
                ))

        retry_attempts = config.get("retry_attempts")
        if retry_attempts is not None:
            if not isinstance(retry_attempts, int) or retry_attempts < 0:
                self._errors.append(ValidationErrorDetail(
                    field="retry_attempts",
                    message="retry_attempts must be a non-negative integer",
                    value=retry_attempts
                ))
            elif retry_attempts > 10:
                self._errors.append(ValidationErrorDetail(
                    field="retry_attempts",
                    message="retry_attempts should not exceed 10",
                    value=retry_attempts
                ))

        retry_delay = config.get("retry_delay")
        if retry_delay is not None:
            if not isinstance(retry_delay, (int, float)) or retry_delay <= 0:
                self._errors.append(ValidationErrorDetail(
                    field="retry_delay",
                    message="retry_delay must be a positive number (milliseconds)",
                    value=retry_delay
                ))
            elif retry_delay > 60000:
                self._errors.append(ValidationErrorDetail(
                    field="retry_delay",
                    message="retry_delay should not exceed 60000ms (1 minute)",
                    value=retry_delay
                ))

        threshold = config.get("low_stock_threshold")
        if threshold is not None:
            if not isinstance(threshold, int) or threshold < 0:
                self._errors.append(ValidationErrorDetail(
                    field="low_stock_threshold",
                    message="low_stock_threshold must be a non-negative integer",
                    value=threshold
                ))

    def _validate_pricing(self, config: Dict[str, Any]) -> None:
        """Validate service charge, tax rate and credit limit"""
        for name in ("service_charge", "credit_limit_default"):
            amount = self._as_decimal(config.get(name))
            if config.get(name) is not None and (amount is None or amount < 0):
                self._errors.append(ValidationErrorDetail(
                    field=name,
                    message=f"{name} must be a non-negative amount",
                    value=config.get(name)
                ))

        tax_rate = config.get("tax_rate")
        if tax_rate is not None:
            rate = self._as_decimal(tax_rate)
            if rate is None or rate < 0 or rate > 1:
                self._errors.append(ValidationErrorDetail(
                    field="tax_rate",
                    message="tax_rate must be a fraction between 0 and 1 (e.g. 0.05)",
                    value=tax_rate
                ))

    @staticmethod
    def _as_decimal(value: Any) -> Optional[Decimal]:
        if value is None or isinstance(value, bool):
            return None
        try:
            return Decimal(str(value))
        except InvalidOperation:
            return None
