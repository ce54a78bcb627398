"""
Backend client module
"""

from shoppro_pos.client.endpoints import Endpoints
from shoppro_pos.client.http_client import (
    HttpClient,
    HttpMethod,
    HttpRequestOptions,
    HttpResponse,
    HttpAuditEntry,
    CircuitState,
    CircuitBreakerConfig,
)
from shoppro_pos.client.pos_client import PosClient

__all__ = [
    "Endpoints",
    "PosClient",
    "HttpClient",
    "HttpMethod",
    "HttpRequestOptions",
    "HttpResponse",
    "HttpAuditEntry",
    "CircuitState",
    "CircuitBreakerConfig",
]
