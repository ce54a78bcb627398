"""Models module initialization"""

from shoppro_pos.models.money import Money, ZERO, to_decimal
from shoppro_pos.models.product import Product
from shoppro_pos.models.cart import Cart, CartLine
from shoppro_pos.models.payment import PaymentMethod, PaymentTender, Tenders
from shoppro_pos.models.sale import (
    CustomerInfo,
    SaleItem,
    SalePayload,
    SaleReceipt,
    SaleRecord,
    SaleRecordItem,
    SaleTotals,
    SaleType,
    TenderSummary,
)
from shoppro_pos.models.credit import (
    CreditAccount,
    CreditPayment,
    CreditStatement,
    Customer,
    SaleAllocation,
    StatementLine,
)
from shoppro_pos.models.notice import Notice, NoticeKind

__all__ = [
    "Money",
    "ZERO",
    "to_decimal",
    "Product",
    "Cart",
    "CartLine",
    "PaymentMethod",
    "PaymentTender",
    "Tenders",
    "CustomerInfo",
    "SaleItem",
    "SalePayload",
    "SaleReceipt",
    "SaleRecord",
    "SaleRecordItem",
    "SaleTotals",
    "SaleType",
    "TenderSummary",
    "CreditAccount",
    "CreditPayment",
    "CreditStatement",
    "Customer",
    "SaleAllocation",
    "StatementLine",
    "Notice",
    "NoticeKind",
]
