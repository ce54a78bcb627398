"""
Pricing, checkout and credit ledger engine

Pure functions over immutable values; nothing here talks to the network.
"""

from shoppro_pos.engine.catalog import ALL_CATEGORIES, Catalog
from shoppro_pos.engine.pricing import (
    add_line,
    add_tender,
    compute_tender_summary,
    compute_totals,
    detect_low_stock,
    remove_tender,
    reset_tenders,
    set_line_field,
    set_line_quantity,
    update_tender,
)
from shoppro_pos.engine.checkout import CheckoutState, build_sale_payload, can_submit
from shoppro_pos.engine.ledger import (
    account_from_customer,
    aggregate_by_customer,
    allocate_payment,
    apply_payment,
    build_credit_statement,
    build_statement_line_items,
    permanent_identity,
    recovered_in_period,
    temporary_identity,
)
from shoppro_pos.engine.reports import (
    SalesSummary,
    search_sales,
    sort_recent_first,
    summarize_sales,
)

__all__ = [
    "ALL_CATEGORIES",
    "Catalog",
    "add_line",
    "add_tender",
    "compute_tender_summary",
    "compute_totals",
    "detect_low_stock",
    "remove_tender",
    "reset_tenders",
    "set_line_field",
    "set_line_quantity",
    "update_tender",
    "CheckoutState",
    "build_sale_payload",
    "can_submit",
    "account_from_customer",
    "aggregate_by_customer",
    "allocate_payment",
    "apply_payment",
    "build_credit_statement",
    "build_statement_line_items",
    "permanent_identity",
    "recovered_in_period",
    "temporary_identity",
    "SalesSummary",
    "search_sales",
    "sort_recent_first",
    "summarize_sales",
]
