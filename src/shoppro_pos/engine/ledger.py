"""
Credit ledger aggregation

Credit accounts are never stored on the terminal. They are rebuilt from
the sale history every time it is fetched:

* permanent credit customers are keyed by their backend customer id
* temporary credit customers have no record of their own and are keyed by
  the exact ``"<name>-<phone>"`` they were given at the till; two sales
  with the same name and phone are treated as the same person
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional

from shoppro_pos.exceptions import ValidationError
from shoppro_pos.models.credit import (
    CreditAccount,
    CreditStatement,
    Customer,
    SaleAllocation,
    StatementLine,
)
from shoppro_pos.models.money import ZERO, to_decimal
from shoppro_pos.models.sale import SaleRecord, SaleType


IdentityFn = Callable[[SaleRecord], Optional[str]]

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def permanent_identity(sale: SaleRecord) -> Optional[str]:
    if sale.sale_type is not SaleType.PERMANENT:
        return None
    return sale.customer_id or None


def temporary_identity(sale: SaleRecord) -> Optional[str]:
    """
    Name and phone composite; unnamed sales have no identity

    The key is the plain ``"<name>-<phone>"`` join, so a hyphen inside
    either field can make two customers collide (``("A-B", "")`` and
    ``("A", "B-")`` both give ``"A-B-"``). Existing ledgers are keyed this
    way, so the format is kept.
    """
    if sale.sale_type is not SaleType.TEMPORARY or sale.customer_info is None:
        return None
    name = sale.customer_info.name
    if not name.strip():
        return None
    return f"{name}-{sale.customer_info.phone}"


def _sale_time(sale: SaleRecord) -> datetime:
    return sale.created_at or _EPOCH


def _display_identity(sale: SaleRecord) -> tuple:
    info = sale.customer_info or sale.customer_details
    if info is None:
        return "", ""
    return info.name, info.phone


def aggregate_by_customer(
    sales: Iterable[SaleRecord], identity_fn: IdentityFn
) -> Dict[str, CreditAccount]:
    """
    Group sales into one credit account per customer

    Sales for which ``identity_fn`` returns nothing are skipped. The
    result is ordered most recent sale first; within an account sales are
    kept oldest first. Input order has no effect on the result.
    """
    grouped: Dict[str, List[SaleRecord]] = {}
    for sale in sales:
        key = identity_fn(sale)
        if not key:
            continue
        grouped.setdefault(key, []).append(sale)

    accounts = []
    for key, members in grouped.items():
        members.sort(key=lambda s: (_sale_time(s), s.id))
        total_billed = sum((s.total for s in members), ZERO)
        total_paid = sum((s.paid_amount for s in members), ZERO)
        latest = members[-1]
        name, phone = _display_identity(latest)
        accounts.append(CreditAccount(
            customer_key=key,
            name=name,
            phone=phone,
            total_billed=total_billed,
            total_paid=total_paid,
            remaining_due=max(ZERO, total_billed - total_paid),
            last_sale_at=latest.created_at,
            sales=tuple(members),
        ))

    accounts.sort(key=lambda a: a.customer_key)
    accounts.sort(key=lambda a: a.last_sale_at or _EPOCH, reverse=True)
    return {account.customer_key: account for account in accounts}


def account_from_customer(customer: Customer) -> CreditAccount:
    """Credit account from the backend's customer record"""
    return CreditAccount(
        customer_key=customer.id,
        name=customer.name,
        phone=customer.phone,
        total_billed=customer.total_paid + customer.remaining_due,
        total_paid=customer.total_paid,
        remaining_due=customer.remaining_due,
    )


def validate_payment_amount(account: CreditAccount, amount: Any) -> Decimal:
    value = to_decimal(amount)
    if value <= 0:
        raise ValidationError("Enter valid amount", field="amount", code="VAL_AMOUNT")
    if value > account.remaining_due:
        raise ValidationError(
            "Amount exceeds due",
            field="amount",
            code="VAL_AMOUNT_EXCEEDS_DUE",
            details={"remaining_due": str(account.remaining_due)},
        )
    return value


def apply_payment(account: CreditAccount, amount: Any) -> CreditAccount:
    """
    Record a payment against an account

    Raises:
        ValidationError: amount is not positive or exceeds the remaining due
    """
    value = validate_payment_amount(account, amount)
    return account.model_copy(update={
        "total_paid": account.total_paid + value,
        "remaining_due": max(ZERO, account.remaining_due - value),
    })


def allocate_payment(sales: Iterable[SaleRecord], amount: Decimal) -> List[SaleAllocation]:
    """Spread one payment over open sales, settling the oldest first"""
    left = to_decimal(amount)
    allocations = []
    for sale in sorted(sales, key=lambda s: (_sale_time(s), s.id)):
        if left <= 0:
            break
        if sale.remaining_due <= 0:
            continue
        applied = min(left, sale.remaining_due)
        left -= applied
        paid = sale.paid_amount + applied
        allocations.append(SaleAllocation(
            sale_id=sale.id,
            applied=applied,
            paid_amount=paid,
            remaining_due=max(ZERO, sale.total - paid),
        ))
    return allocations


def build_statement_line_items(sales: Iterable[SaleRecord]) -> List[StatementLine]:
    """One row per distinct item name, quantities and amounts summed"""
    merged: Dict[str, Dict[str, Any]] = {}
    for sale in sales:
        for item in sale.items:
            row = merged.get(item.name)
            if row is None:
                merged[item.name] = {
                    "name": item.name,
                    "quantity": item.qty,
                    "price": item.price,
                    "total": item.price * item.qty,
                }
            else:
                row["quantity"] += item.qty
                row["total"] += item.price * item.qty
    return [StatementLine(**row) for row in merged.values()]


def recovered_in_period(period_total_billed: Decimal, current_remaining_due: Decimal) -> Decimal:
    """
    Credit from the period that has since been paid back

    Approximate: later payments are not matched against the period, so
    paying down older debt inside the period is counted as recovery.
    """
    return max(ZERO, period_total_billed - current_remaining_due)


def build_credit_statement(
    sales: List[SaleRecord],
    remaining_due: Decimal,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> CreditStatement:
    """Consolidated statement of the sales a customer made in a date range"""
    if not sales:
        raise ValidationError("No sales to print", field="sales", code="VAL_NO_SALES")

    period_total = sum((s.total for s in sales), ZERO)
    return CreditStatement(
        lines=build_statement_line_items(sales),
        receipt_count=len(sales),
        period_total=period_total,
        recovered=recovered_in_period(period_total, remaining_due),
        remaining_due=remaining_due,
        date_from=date_from,
        date_to=date_to,
    )
