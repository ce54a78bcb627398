"""Payment models"""

from enum import Enum
from typing import Tuple

from pydantic import BaseModel, Field

from shoppro_pos.models.money import Money, ZERO


class PaymentMethod(str, Enum):
    """Payment instruments accepted at the till"""
    CASH = "cash"
    CARD = "card"
    UPI = "upi"
    EASYPAISA = "easypaisa"
    JAZZCASH = "jazzcash"
    BANK = "bank"

    @property
    def label(self) -> str:
        return _METHOD_LABELS[self][0]

    @property
    def detail_placeholder(self) -> str:
        """Hint for the reference field, empty for cash"""
        return _METHOD_LABELS[self][1]

    @property
    def requires_detail(self) -> bool:
        return self is not PaymentMethod.CASH


_METHOD_LABELS = {
    PaymentMethod.CASH: ("Cash", ""),
    PaymentMethod.CARD: ("Card", "Last 4 digits"),
    PaymentMethod.UPI: ("UPI", "UPI ID"),
    PaymentMethod.EASYPAISA: ("EasyPaisa", "Mobile Number"),
    PaymentMethod.JAZZCASH: ("JazzCash", "Mobile Number"),
    PaymentMethod.BANK: ("Bank Transfer", "Reference No"),
}


class PaymentTender(BaseModel):
    """One payment instrument within a checkout"""

    method: PaymentMethod = Field(PaymentMethod.CASH, description="Payment method")
    amount: Money = Field(ZERO, ge=0, description="Amount tendered")
    detail: str = Field("", description="Card last 4, mobile number or bank reference")

    model_config = {
        "frozen": True,
    }


Tenders = Tuple[PaymentTender, ...]
