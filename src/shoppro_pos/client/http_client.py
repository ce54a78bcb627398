"""
HTTP transport layer for the shop backend
Handles all HTTP communication with retry logic, a circuit breaker,
audit logging and connection pooling
"""

import time
import uuid
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

import requests
from requests.adapters import HTTPAdapter

from shoppro_pos.config.pos_config import PosConfig
from shoppro_pos.exceptions import PosError, NetworkError


logger = logging.getLogger(__name__)


class HttpMethod(str, Enum):
    """HTTP method types supported"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


# POST creates sales and payments; repeating it could double-book
IDEMPOTENT_METHODS = {HttpMethod.GET, HttpMethod.PUT, HttpMethod.DELETE, HttpMethod.PATCH}

RETRYABLE_STATUSES = [408, 429, 500, 502, 503, 504]


class CircuitState(str, Enum):
    """Circuit breaker states"""
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


@dataclass
class CircuitBreakerConfig:
    """Circuit breaker configuration"""
    failure_threshold: int = 5
    recovery_timeout: int = 30000  # milliseconds
    success_threshold: int = 3


@dataclass
class HttpRequestOptions:
    """Request options for HTTP client"""
    headers: Optional[Dict[str, str]] = None
    params: Optional[Dict[str, Union[str, int, bool]]] = None
    timeout: Optional[int] = None  # milliseconds
    skip_retry: bool = False


@dataclass
class HttpResponse:
    """HTTP response wrapper"""
    data: Any
    status: int
    headers: Dict[str, str]
    duration: int  # milliseconds
    request_id: str


@dataclass
class HttpAuditEntry:
    """Audit log entry for HTTP requests"""
    timestamp: str
    request_id: str
    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[Any] = None
    response: Optional[Dict[str, Any]] = None
    duration: int = 0
    success: bool = False
    error: Optional[str] = None
    retry_attempt: Optional[int] = None


# Sensitive fields that should be redacted in logs
SENSITIVE_FIELDS = [
    "authorization",
    "token",
    "password",
    "cnic",
]


class HttpClient:
    """
    HTTP Client for the shop backend REST API

    Features:
    - Retry with exponential backoff for idempotent requests
    - Circuit breaker pattern for resilience
    - Request ID generation for traceability
    - Audit logging with sensitive fields redacted
    - Connection keep-alive via session pooling

    Example:
        >>> client = HttpClient(PosConfig(base_url="http://localhost:5000"))
        >>> response = client.get("/api/products")
        >>> print(response.data)
    """

    def __init__(
        self,
        config: PosConfig,
        circuit_breaker_config: Optional[CircuitBreakerConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.circuit_config = circuit_breaker_config or CircuitBreakerConfig()

        self._circuit_state = CircuitState.CLOSED
        self._circuit_failure_count = 0
        self._circuit_success_count = 0
        self._circuit_open_time = 0.0

        self._audit_log_callback: Optional[Callable[[HttpAuditEntry], None]] = None

        self._session = session or self._create_session()
        self._apply_default_headers(self._session)

    def _create_session(self) -> requests.Session:
        """Create requests session with connection pooling"""
        session = requests.Session()

        # Retries are handled here, not by urllib3
        adapter = HTTPAdapter(
            pool_connections=10,
            pool_maxsize=10,
            max_retries=0,
        )

        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def _apply_default_headers(self, session: requests.Session) -> None:
        session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        if self.config.api_token:
            session.headers["Authorization"] = f"Bearer {self.config.api_token}"

    def _generate_request_id(self) -> str:
        """Generate unique request ID for traceability"""
        timestamp = hex(int(time.time() * 1000))[2:]
        unique_id = uuid.uuid4().hex[:8]
        return f"pos-{timestamp}-{unique_id}"

    def _redact_sensitive_data(self, obj: Any) -> Any:
        """Redact sensitive data from object for logging"""
        if isinstance(obj, list):
            return [self._redact_sensitive_data(item) for item in obj]

        if isinstance(obj, dict):
            redacted = {}
            for key, value in obj.items():
                lower_key = str(key).lower()
                if any(field in lower_key for field in SENSITIVE_FIELDS):
                    redacted[key] = "[REDACTED]"
                elif isinstance(value, (dict, list)):
                    redacted[key] = self._redact_sensitive_data(value)
                else:
                    redacted[key] = value
            return redacted

        return obj

    def _check_circuit_breaker(self) -> None:
        """Check circuit breaker state and raise if open"""
        if self._circuit_state == CircuitState.OPEN:
            time_since_open = (time.time() * 1000) - self._circuit_open_time

            if time_since_open >= self.circuit_config.recovery_timeout:
                self._circuit_state = CircuitState.HALF_OPEN
                self._circuit_success_count = 0
                logger.info("Circuit breaker transitioning to HALF_OPEN state")
            else:
                retry_after = int(
                    (self.circuit_config.recovery_timeout - time_since_open) / 1000
                )
                raise NetworkError.circuit_breaker_open(retry_after)

    def _record_circuit_success(self) -> None:
        """Record circuit breaker success"""
        if self._circuit_state == CircuitState.HALF_OPEN:
            self._circuit_success_count += 1

            if self._circuit_success_count >= self.circuit_config.success_threshold:
                self._circuit_state = CircuitState.CLOSED
                self._circuit_failure_count = 0
                self._circuit_success_count = 0
                logger.info("Circuit breaker CLOSED after successful recovery")
        elif self._circuit_state == CircuitState.CLOSED:
            self._circuit_failure_count = 0

    def _record_circuit_failure(self) -> None:
        """Record circuit breaker failure"""
        if self._circuit_state == CircuitState.HALF_OPEN:
            self._circuit_state = CircuitState.OPEN
            self._circuit_open_time = time.time() * 1000
            logger.warning("Circuit breaker REOPENED after failure in half-open state")
        elif self._circuit_state == CircuitState.CLOSED:
            self._circuit_failure_count += 1

            if self._circuit_failure_count >= self.circuit_config.failure_threshold:
                self._circuit_state = CircuitState.OPEN
                self._circuit_open_time = time.time() * 1000
                logger.warning(
                    "Circuit breaker OPENED after %d failures",
                    self._circuit_failure_count,
                )

    def _calculate_retry_delay(self, attempt: int) -> float:
        """
        Calculate retry delay with exponential backoff

        Args:
            attempt: Current attempt number (0-based)

        Returns:
            Delay in seconds, capped at 16
        """
        delay_ms = self.config.retry_delay * (2 ** attempt)
        delay_ms = min(delay_ms, 16000)
        return delay_ms / 1000.0

    def _is_retryable_error(self, error: PosError) -> bool:
        """Transport failures and 408/429/5xx are worth another attempt"""
        if isinstance(error, NetworkError):
            return error.retryable
        return error.status_code in RETRYABLE_STATUSES

    def _counts_against_circuit(self, error: PosError) -> bool:
        """A 4xx is the backend answering; it says nothing about its health"""
        if isinstance(error, NetworkError):
            return True
        return error.status_code is not None and error.status_code >= 500

    def _normalize_error(
        self, error: Exception, response: Optional[requests.Response] = None
    ) -> PosError:
        """Normalize error from various sources into PosError"""
        if isinstance(error, PosError):
            return error

        if isinstance(error, requests.exceptions.Timeout):
            return NetworkError.timeout()

        if isinstance(error, requests.exceptions.ConnectionError):
            return NetworkError(f"Connection error: {error}", network_code="NET02")

        if isinstance(error, requests.exceptions.HTTPError) and response is not None:
            message = None
            try:
                data = response.json()
                if isinstance(data, dict):
                    message = data.get("message") or data.get("error")
            except ValueError:
                pass
            return PosError(
                message or f"Request failed with status {response.status_code}",
                code=f"API{response.status_code}",
                status_code=response.status_code,
                cause=error,
            )

        if isinstance(error, requests.exceptions.RequestException):
            return NetworkError(f"Request error: {error}")

        return PosError(f"Request error: {error}", cause=error)

    def _create_audit_entry(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[Any],
        request_id: str,
        start_time: float,
        response: Optional[requests.Response] = None,
        error: Optional[Exception] = None,
        retry_attempt: Optional[int] = None,
    ) -> HttpAuditEntry:
        """Create audit log entry"""
        duration = int((time.time() - start_time) * 1000)

        response_data = None
        if response is not None:
            try:
                response_body = response.json()
            except ValueError:
                response_body = response.text[:500] if response.text else None

            response_data = {
                "statusCode": response.status_code,
                "body": self._redact_sensitive_data(response_body),
            }

        return HttpAuditEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            request_id=request_id,
            method=method,
            url=url,
            headers=self._redact_sensitive_data(dict(headers)),
            body=self._redact_sensitive_data(body),
            response=response_data,
            duration=duration,
            success=error is None,
            error=str(error) if error else None,
            retry_attempt=retry_attempt,
        )

    def _log_audit(self, entry: HttpAuditEntry) -> None:
        if self.config.enable_audit_log and self._audit_log_callback:
            self._audit_log_callback(entry)

    def set_audit_log_callback(
        self, callback: Callable[[HttpAuditEntry], None]
    ) -> None:
        """Set audit log callback"""
        self._audit_log_callback = callback

    def _execute_with_retry(
        self,
        method: HttpMethod,
        url: str,
        data: Optional[Any] = None,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse:
        """Execute HTTP request with retry logic"""
        options = options or HttpRequestOptions()

        self._check_circuit_breaker()

        retry_allowed = not options.skip_retry and method in IDEMPOTENT_METHODS
        max_attempts = self.config.retry_attempts + 1 if retry_allowed else 1

        full_url = f"{self.config.base_url}{url}"
        timeout_seconds = (options.timeout or self.config.timeout) / 1000.0

        attempts: List[str] = []
        for attempt in range(max_attempts):
            start_time = time.time()
            request_id = self._generate_request_id()
            attempts.append(request_id)

            headers = dict(self._session.headers)
            headers["X-Request-ID"] = request_id
            if options.headers:
                headers.update(options.headers)

            response: Optional[requests.Response] = None

            try:
                response = self._session.request(
                    method.value,
                    full_url,
                    headers=headers,
                    params=options.params,
                    json=data,
                    timeout=timeout_seconds,
                )
                response.raise_for_status()
            except Exception as e:
                error = self._normalize_error(e, response)

                if self._counts_against_circuit(error):
                    self._record_circuit_failure()

                self._log_audit(self._create_audit_entry(
                    method=method.value,
                    url=full_url,
                    headers=headers,
                    body=data,
                    request_id=request_id,
                    start_time=start_time,
                    response=response,
                    error=error,
                    retry_attempt=attempt,
                ))

                if attempt < max_attempts - 1 and self._is_retryable_error(error):
                    delay = self._calculate_retry_delay(attempt)
                    logger.warning(
                        "%s %s failed (attempt %d/%d), retrying in %.2fs: %s",
                        method.value, url, attempt + 1, max_attempts, delay, error,
                    )
                    time.sleep(delay)
                    continue

                logger.error("%s %s failed: %s", method.value, url, error.get_description())
                if error is e:
                    raise
                raise error from e

            self._record_circuit_success()
            self._log_audit(self._create_audit_entry(
                method=method.value,
                url=full_url,
                headers=headers,
                body=data,
                request_id=request_id,
                start_time=start_time,
                response=response,
                retry_attempt=attempt if attempt > 0 else None,
            ))

            try:
                response_data = response.json()
            except ValueError:
                response_data = response.text

            return HttpResponse(
                data=response_data,
                status=response.status_code,
                headers=dict(response.headers),
                duration=int((time.time() - start_time) * 1000),
                request_id=request_id,
            )

        raise PosError(f"Request failed after {len(attempts)} attempts")

    def get(
        self,
        url: str,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse:
        """Perform GET request (URL relative to base URL)"""
        return self._execute_with_retry(HttpMethod.GET, url, None, options)

    def post(
        self,
        url: str,
        data: Optional[Any] = None,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse:
        """Perform POST request; never retried"""
        return self._execute_with_retry(HttpMethod.POST, url, data, options)

    def put(
        self,
        url: str,
        data: Optional[Any] = None,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse:
        return self._execute_with_retry(HttpMethod.PUT, url, data, options)

    def delete(
        self,
        url: str,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse:
        return self._execute_with_retry(HttpMethod.DELETE, url, None, options)

    def patch(
        self,
        url: str,
        data: Optional[Any] = None,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse:
        return self._execute_with_retry(HttpMethod.PATCH, url, data, options)

    @property
    def circuit_state(self) -> CircuitState:
        """Get current circuit breaker state"""
        return self._circuit_state

    def reset_circuit_breaker(self) -> None:
        """Reset circuit breaker to closed state"""
        self._circuit_state = CircuitState.CLOSED
        self._circuit_failure_count = 0
        self._circuit_success_count = 0
        self._circuit_open_time = 0.0
        logger.info("Circuit breaker manually reset to CLOSED state")

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def close(self) -> None:
        """Close the HTTP session"""
        self._session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
