"""
SHOP PRO point-of-sale engine

Cart pricing, payment reconciliation and credit ledgers for the sales
terminal, plus a client for the shop backend.
"""

from shoppro_pos.exceptions import (
    PosError,
    PosErrorCategory,
    ValidationError,
    StockError,
    NetworkError,
    ConfigError,
)

# Configuration
from shoppro_pos.config import (
    PosConfig,
    ConfigLoader,
    ConfigValidator,
    ConfigDefaults,
    ENV_VAR_MAPPING,
)

# Models
from shoppro_pos.models import (
    CartLine,
    CreditAccount,
    CreditPayment,
    CreditStatement,
    Customer,
    CustomerInfo,
    Notice,
    NoticeKind,
    PaymentMethod,
    PaymentTender,
    Product,
    SalePayload,
    SaleReceipt,
    SaleRecord,
    SaleTotals,
    SaleType,
    StatementLine,
    TenderSummary,
)

# Engine
from shoppro_pos.engine import (
    Catalog,
    CheckoutState,
    add_line,
    add_tender,
    aggregate_by_customer,
    apply_payment,
    build_sale_payload,
    build_statement_line_items,
    compute_tender_summary,
    compute_totals,
    detect_low_stock,
    permanent_identity,
    recovered_in_period,
    remove_tender,
    set_line_field,
    set_line_quantity,
    temporary_identity,
    update_tender,
)

# Backend
from shoppro_pos.client import HttpClient, PosClient
from shoppro_pos.services import CheckoutService, CreditService

__version__ = "0.1.0"

__all__ = [
    # Exceptions
    "PosError",
    "PosErrorCategory",
    "ValidationError",
    "StockError",
    "NetworkError",
    "ConfigError",
    # Configuration
    "PosConfig",
    "ConfigLoader",
    "ConfigValidator",
    "ConfigDefaults",
    "ENV_VAR_MAPPING",
    # Models
    "CartLine",
    "CreditAccount",
    "CreditPayment",
    "CreditStatement",
    "Customer",
    "CustomerInfo",
    "Notice",
    "NoticeKind",
    "PaymentMethod",
    "PaymentTender",
    "Product",
    "SalePayload",
    "SaleReceipt",
    "SaleRecord",
    "SaleTotals",
    "SaleType",
    "StatementLine",
    "TenderSummary",
    # Engine
    "Catalog",
    "CheckoutState",
    "add_line",
    "add_tender",
    "aggregate_by_customer",
    "apply_payment",
    "build_sale_payload",
    "build_statement_line_items",
    "compute_tender_summary",
    "compute_totals",
    "detect_low_stock",
    "permanent_identity",
    "recovered_in_period",
    "remove_tender",
    "set_line_field",
    "set_line_quantity",
    "temporary_identity",
    "update_tender",
    # Backend
    "HttpClient",
    "PosClient",
    "CheckoutService",
    "CreditService",
]
