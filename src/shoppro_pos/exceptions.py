"""Exception classes for the SHOP PRO POS engine"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class PosErrorCategory(str, Enum):
    """POS error category codes"""
    VALIDATION = "VAL"
    STOCK = "STOCK"
    NETWORK = "NET"
    API = "API"
    CONFIG = "CONFIG"
    UNKNOWN = "UNKNOWN"


class PosError(Exception):
    """
    Base exception for POS errors

    All errors raised by the engine, the HTTP client and the services
    extend from this class. The message is always safe to show to the
    operator as-is.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.cause = cause
        self.details = details
        self.timestamp = datetime.now(timezone.utc)
        self.category = self._determine_category(code)

    @property
    def message(self) -> str:
        return str(self)

    def _determine_category(self, code: Optional[str]) -> PosErrorCategory:
        """Determine error category from code"""
        if not code:
            return PosErrorCategory.UNKNOWN

        if code.startswith("VAL"):
            return PosErrorCategory.VALIDATION
        if code.startswith("STOCK"):
            return PosErrorCategory.STOCK
        if code.startswith("NET"):
            return PosErrorCategory.NETWORK
        if code.startswith("API"):
            return PosErrorCategory.API
        if code.startswith("CONFIG"):
            return PosErrorCategory.CONFIG

        return PosErrorCategory.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary"""
        return {
            "name": self.__class__.__name__,
            "message": str(self),
            "code": self.code,
            "status_code": self.status_code,
            "category": self.category.value,
            "timestamp": self.timestamp.isoformat(),
            "details": self.details,
        }

    def has_code(self, code: str) -> bool:
        """Check if error has a specific code"""
        return self.code == code

    def is_category(self, category: PosErrorCategory) -> bool:
        """Check if error belongs to a category"""
        return self.category == category

    def get_description(self) -> str:
        """Get human-readable error description"""
        parts = [str(self)]

        if self.code:
            parts.insert(0, f"[{self.code}]")

        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")

        return " ".join(parts)


class ValidationError(PosError):
    """Local validation failure; the attempted mutation was not applied"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        code: str = "VALIDATION_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, details=details)
        self.field = field


class StockError(ValidationError):
    """Requested quantity exceeds available stock"""

    def __init__(
        self,
        message: str,
        available: int,
        product_id: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            field="quantity",
            code="STOCK01",
            details={"available": available, "product_id": product_id},
        )
        # code prefix STOCK, not VAL
        self.category = PosErrorCategory.STOCK
        self.available = available
        self.product_id = product_id


class NetworkError(PosError):
    """
    Network error for HTTP transport layer failures
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        network_code: str = "NET10",
        retryable: bool = True,
    ) -> None:
        super().__init__(message, code=network_code, status_code=status_code)
        self.network_code = network_code
        self.retryable = retryable

    @classmethod
    def timeout(cls, message: str = "Request timed out") -> "NetworkError":
        """Create a timeout error"""
        return cls(message, status_code=408, network_code="NET01", retryable=True)

    @classmethod
    def connection_refused(
        cls, message: str = "Connection refused"
    ) -> "NetworkError":
        """Create a connection refused error"""
        return cls(message, network_code="NET02", retryable=True)

    @classmethod
    def circuit_breaker_open(cls, retry_after_seconds: int) -> "NetworkError":
        """Create a circuit breaker open error"""
        return cls(
            f"Circuit breaker is open. Retry after {retry_after_seconds} seconds",
            status_code=503,
            network_code="NET05",
            retryable=False,
        )


class ConfigError(PosError):
    """Configuration error"""

    def __init__(
        self,
        message: str,
        code: str = "CONFIG01",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, details=details)
