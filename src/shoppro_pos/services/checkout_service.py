"""
Sale submission

Validates the terminal's checkout state, sends the sale to the backend and
hands back a cleared state only once the backend has accepted it.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional, Tuple

from shoppro_pos.client.pos_client import PosClient
from shoppro_pos.config.pos_config import PosConfig
from shoppro_pos.engine.checkout import CheckoutState, build_sale_payload
from shoppro_pos.engine.pricing import detect_low_stock
from shoppro_pos.exceptions import PosError, ValidationError
from shoppro_pos.models.money import ZERO
from shoppro_pos.models.notice import Notice, NoticeKind
from shoppro_pos.models.sale import SaleReceipt, SaleType
from shoppro_pos.utils.formatting import format_money, short_sale_id


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    """Completed sale: receipt data, the state to continue with, and notices"""
    receipt: SaleReceipt
    state: CheckoutState
    notices: Tuple[Notice, ...]


class CheckoutService:
    """
    Finalizes sales for one terminal

    Only one sale can be in flight at a time; a second ``finalize`` while
    the first is pending is rejected.
    """

    def __init__(self, client: PosClient, config: Optional[PosConfig] = None) -> None:
        self.client = client
        self.config = config or client.config
        self._submitting = False

    def new_state(self, sale_type: SaleType = SaleType.CASH) -> CheckoutState:
        """Empty checkout priced with this shop's service charge and tax rate"""
        return CheckoutState(
            sale_type=sale_type,
            service_charge=self.config.service_charge,
            tax_rate=self.config.tax_rate,
        )

    @property
    def submitting(self) -> bool:
        return self._submitting

    def finalize(self, state: CheckoutState, customer_name: str = "") -> CheckoutResult:
        """
        Submit the sale described by ``state``

        Args:
            state: Current checkout state
            customer_name: Display name of the selected permanent customer

        Returns:
            CheckoutResult with the cleared state to continue from

        Raises:
            ValidationError: checkout is incomplete; nothing was sent
            PosError: backend rejected the sale; ``state`` is still valid
                and the call can be retried
        """
        if self._submitting:
            raise ValidationError("Sale already in progress", code="VAL_IN_PROGRESS")

        totals = state.totals
        payload = build_sale_payload(
            state.sale_type,
            state.cart,
            totals,
            customer_id=state.customer_id,
            customer_info=state.customer_info,
            tenders=state.tenders,
        )

        self._submitting = True
        try:
            created = self.client.create_sale(payload)
        except PosError as e:
            logger.warning("Sale submission failed: %s", e)
            raise PosError(
                f"Sale failed: {e}",
                code=e.code,
                status_code=e.status_code,
                cause=e,
            ) from e
        finally:
            self._submitting = False

        sale_id = str(created.get("_id") or f"SALE-{int(time.time() * 1000)}")
        short_id = short_sale_id(sale_id)

        if state.sale_type is SaleType.TEMPORARY:
            customer_name = state.customer_info.name.strip()
        elif state.sale_type is SaleType.CASH:
            customer_name = ""

        low_stock = detect_low_stock(state.cart, self.config.low_stock_threshold)
        change_due = state.tender_summary.change_due if state.sale_type is SaleType.CASH else ZERO

        receipt = SaleReceipt(
            sale_id=sale_id,
            short_id=short_id,
            sale_type=state.sale_type,
            total=totals.grand_total,
            change_due=change_due,
            items=state.cart,
            customer_name=customer_name,
            low_stock=low_stock,
        )

        symbol = self.config.currency_symbol
        notices = [Notice(
            kind=NoticeKind.SUCCESS,
            message=f"Sale #{short_id} completed! {format_money(totals.grand_total, symbol, 0)}",
        )]
        if low_stock:
            notices.append(Notice(
                kind=NoticeKind.LOW_STOCK,
                message=f"Low stock: {', '.join(low_stock)}",
            ))
            logger.warning("Low stock after sale %s: %s", short_id, ", ".join(low_stock))

        logger.info(
            "Sale %s completed (%s, total %s)",
            sale_id, state.sale_type.value, format_money(totals.grand_total, symbol),
        )
        return CheckoutResult(receipt=receipt, state=state.cleared(), notices=tuple(notices))
