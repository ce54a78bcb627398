"""
Credit ledgers for permanent and temporary credit customers

Payments are applied to the local ledger first, then sent to the backend.
The backend's figures win when it answers; if it fails, the ledger is put
back exactly as it was before the payment.
"""

import logging
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from shoppro_pos.client.pos_client import PosClient
from shoppro_pos.engine.ledger import (
    account_from_customer,
    aggregate_by_customer,
    allocate_payment,
    apply_payment,
    build_credit_statement,
    permanent_identity,
    temporary_identity,
)
from shoppro_pos.exceptions import PosError, ValidationError
from shoppro_pos.models.credit import CreditAccount, CreditPayment, CreditStatement
from shoppro_pos.models.money import ZERO
from shoppro_pos.models.payment import PaymentMethod


logger = logging.getLogger(__name__)


def _server_amount(value: Any) -> Optional[Decimal]:
    """A finite number from the response, or None when absent or garbled"""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def reconcile(optimistic: CreditAccount, server: Mapping[str, Any]) -> CreditAccount:
    """
    Take totalPaid / remainingDue from the backend response

    A field that is missing or not a number keeps the optimistic value.
    """
    total_paid = _server_amount(server.get("totalPaid"))
    remaining_due = _server_amount(server.get("remainingDue"))
    return optimistic.model_copy(update={
        "total_paid": optimistic.total_paid if total_paid is None else total_paid,
        "remaining_due": (
            optimistic.remaining_due if remaining_due is None else max(ZERO, remaining_due)
        ),
    })


class CreditService:
    """
    Credit ledger for one screen

    Holds the accounts last loaded from the backend. Each instance owns its
    accounts; nothing is shared between instances.
    """

    def __init__(self, client: PosClient) -> None:
        self.client = client
        self._permanent: Dict[str, CreditAccount] = {}
        self._temporary: Dict[str, CreditAccount] = {}

    @property
    def permanent_accounts(self) -> List[CreditAccount]:
        return list(self._permanent.values())

    @property
    def temporary_accounts(self) -> List[CreditAccount]:
        return list(self._temporary.values())

    def get_permanent(self, customer_id: str) -> CreditAccount:
        try:
            return self._permanent[customer_id]
        except KeyError:
            raise ValidationError("Select a customer", field="customer", code="VAL_CUSTOMER") from None

    def get_temporary(self, customer_key: str) -> CreditAccount:
        try:
            return self._temporary[customer_key]
        except KeyError:
            raise ValidationError("Unknown customer", field="customer", code="VAL_CUSTOMER") from None

    # Loading

    def load_permanent_accounts(self) -> List[CreditAccount]:
        """Accounts from the backend's customer records"""
        customers = self.client.list_permanent_customers()
        self._permanent = {c.id: account_from_customer(c) for c in customers}
        return self.permanent_accounts

    def aggregate_permanent_sales(self) -> List[CreditAccount]:
        """Accounts rebuilt from the full sales history, keyed by customer id"""
        sales = self.client.list_sales()
        self._permanent = aggregate_by_customer(sales, permanent_identity)
        return self.permanent_accounts

    def load_temporary_accounts(self) -> List[CreditAccount]:
        sales = self.client.list_temporary_sales()
        self._temporary = aggregate_by_customer(sales, temporary_identity)
        return self.temporary_accounts

    # Payments

    def record_payment(
        self,
        customer_id: str,
        amount: Any,
        method: PaymentMethod = PaymentMethod.CASH,
        detail: str = "Payment recorded",
        sale_id: Optional[str] = None,
        when: Optional[datetime] = None,
    ) -> CreditAccount:
        """
        Record a payment from a permanent credit customer

        Raises:
            ValidationError: invalid amount; ledger unchanged
            PosError: backend rejected the payment; ledger restored
        """
        snapshot = self.get_permanent(customer_id)
        optimistic = apply_payment(snapshot, amount)
        value = optimistic.total_paid - snapshot.total_paid
        self._permanent[customer_id] = optimistic

        payment = CreditPayment(
            amount=value,
            method=method,
            detail=detail,
            date=when or datetime.now(timezone.utc),
            sale_id=sale_id,
        )
        try:
            server = self.client.record_customer_payment(customer_id, payment)
        except PosError as e:
            self._permanent[customer_id] = snapshot
            logger.warning("Payment for %s rolled back: %s", customer_id, e)
            raise PosError(
                f"Payment failed: {e}", code=e.code, status_code=e.status_code, cause=e
            ) from e

        account = reconcile(optimistic, server)
        self._permanent[customer_id] = account
        logger.info("Recorded payment of %s for customer %s", value, customer_id)
        return account

    def record_temporary_payment(self, customer_key: str, amount: Any) -> CreditAccount:
        """
        Record a payment from a temporary credit customer

        The amount is spread over the customer's open sales, oldest first,
        and each affected sale is updated on the backend. Already-updated
        sales are not reverted if a later update fails.

        Raises:
            ValidationError: invalid amount; ledger unchanged
            PosError: a sale update failed; ledger restored
        """
        snapshot = self.get_temporary(customer_key)
        optimistic = apply_payment(snapshot, amount)
        value = optimistic.total_paid - snapshot.total_paid
        allocations = allocate_payment(snapshot.sales, value)

        by_id = {a.sale_id: a for a in allocations}
        optimistic = optimistic.model_copy(update={"sales": tuple(
            sale.model_copy(update={"paid_amount": by_id[sale.id].paid_amount})
            if sale.id in by_id else sale
            for sale in snapshot.sales
        )})
        self._temporary[customer_key] = optimistic

        try:
            for allocation in allocations:
                self.client.update_sale_payment(
                    allocation.sale_id, allocation.paid_amount, allocation.remaining_due
                )
        except PosError as e:
            self._temporary[customer_key] = snapshot
            logger.warning("Payment for %s rolled back: %s", customer_key, e)
            raise PosError(
                "Payment update failed", code=e.code, status_code=e.status_code, cause=e
            ) from e

        logger.info(
            "Recorded payment of %s for %s across %d sale(s)",
            value, customer_key, len(allocations),
        )

        try:
            self.load_temporary_accounts()
        except PosError as e:
            logger.warning("Could not refresh temporary credit after payment: %s", e)
            return optimistic
        return self._temporary.get(customer_key, optimistic)

    # Statements

    def statement(
        self,
        customer_id: str,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> CreditStatement:
        """
        Consolidated credit statement for a permanent customer

        Raises:
            ValidationError: no sales in the range
        """
        remaining: Decimal = self.get_permanent(customer_id).remaining_due
        sales = self.client.list_customer_sales(customer_id, date_from, date_to)
        return build_credit_statement(sales, remaining, date_from, date_to)
