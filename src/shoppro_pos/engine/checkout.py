"""
Checkout validation and sale payload construction
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Optional

from shoppro_pos.config.pos_config import ConfigDefaults
from shoppro_pos.engine.pricing import (
    compute_tender_summary,
    compute_totals,
    reset_tenders,
)
from shoppro_pos.exceptions import ValidationError
from shoppro_pos.models.cart import Cart
from shoppro_pos.models.money import ZERO
from shoppro_pos.models.payment import Tenders
from shoppro_pos.models.sale import (
    CustomerInfo,
    SaleItem,
    SalePayload,
    SaleTotals,
    SaleType,
    TenderSummary,
)


@dataclass(frozen=True)
class CheckoutState:
    """Everything the sales terminal holds for the sale in progress"""
    cart: Cart = ()
    discount_percent: Decimal = ZERO
    tenders: Tenders = field(default_factory=reset_tenders)
    sale_type: SaleType = SaleType.CASH
    customer_id: Optional[str] = None
    customer_info: CustomerInfo = field(default_factory=CustomerInfo)
    service_charge: Decimal = ConfigDefaults.SERVICE_CHARGE
    tax_rate: Decimal = ConfigDefaults.TAX_RATE

    @property
    def totals(self) -> SaleTotals:
        return compute_totals(
            self.cart, self.discount_percent, self.service_charge, self.tax_rate
        )

    @property
    def tender_summary(self) -> TenderSummary:
        return compute_tender_summary(self.tenders, self.totals.grand_total)

    def evolve(self, **changes) -> "CheckoutState":
        return replace(self, **changes)

    def cleared(self) -> "CheckoutState":
        """Fresh state after a completed sale, keeping sale type and pricing"""
        return CheckoutState(
            sale_type=self.sale_type,
            service_charge=self.service_charge,
            tax_rate=self.tax_rate,
        )


def can_submit(sale_type: SaleType, summary: TenderSummary) -> bool:
    """Credit sales skip tender collection; cash sales must be fully covered"""
    if sale_type.is_credit:
        return True
    return summary.is_covered


def build_sale_payload(
    sale_type: SaleType,
    cart: Cart,
    totals: SaleTotals,
    customer_id: Optional[str] = None,
    customer_info: Optional[CustomerInfo] = None,
    tenders: Tenders = (),
) -> SalePayload:
    """
    Validate a checkout and build the sale creation request

    Checks run in order and the first failure wins: empty cart, missing
    permanent customer, missing temporary customer name, then for cash
    sales tender coverage and tender references.

    Raises:
        ValidationError: the sale cannot be submitted as it stands
    """
    if not cart:
        raise ValidationError("Cart is empty", field="cart", code="VAL_CART_EMPTY")

    if sale_type is SaleType.PERMANENT and not customer_id:
        raise ValidationError(
            "Select a customer", field="customer", code="VAL_CUSTOMER"
        )

    if sale_type is SaleType.TEMPORARY and (
        customer_info is None or not customer_info.name.strip()
    ):
        raise ValidationError(
            "Enter customer name", field="customerInfo", code="VAL_CUSTOMER_NAME"
        )

    paid_amount = ZERO
    if sale_type is SaleType.CASH:
        summary = compute_tender_summary(tenders, totals.grand_total)
        if not can_submit(sale_type, summary):
            raise ValidationError(
                "Payment does not cover the total",
                field="payments",
                code="VAL_UNDERPAID",
                details={"remaining": str(summary.remaining)},
            )
        for tender in tenders:
            if tender.method.requires_detail and tender.amount > 0 and not tender.detail.strip():
                raise ValidationError(
                    f"Enter {tender.method.detail_placeholder} for {tender.method.label}",
                    field="detail",
                    code="VAL_TENDER_DETAIL",
                )
        paid_amount = summary.total_tendered

    return SalePayload(
        items=[SaleItem.from_cart_line(line) for line in cart],
        customer=customer_id if sale_type is SaleType.PERMANENT else None,
        customer_info=(
            CustomerInfo(name=customer_info.name.strip(), phone=customer_info.phone.strip())
            if sale_type is SaleType.TEMPORARY and customer_info is not None
            else None
        ),
        sale_type=sale_type,
        payments=[],
        paid_amount=paid_amount,
        subtotal=totals.subtotal,
        discount_percent=totals.discount_percent,
        service_charge=totals.service_charge,
        tax=totals.tax_amount,
        total=totals.grand_total,
    )
