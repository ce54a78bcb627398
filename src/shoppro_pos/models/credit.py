"""Credit ledger models"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from shoppro_pos.models.money import Money, ZERO
from shoppro_pos.models.payment import PaymentMethod
from shoppro_pos.models.sale import SaleRecord


class Customer(BaseModel):
    """Permanent credit customer record"""

    id: str = Field(..., alias="_id", description="Customer ID")
    name: str = Field(..., description="Customer name")
    phone: str = Field("", description="Contact phone")
    email: Optional[str] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    cnic: Optional[str] = Field(None, description="National identity card number")
    credit_limit: Money = Field(Decimal("50000"), alias="creditLimit")
    due_date: Optional[str] = Field(None, alias="dueDate")
    total_paid: Money = Field(ZERO, alias="totalPaid")
    remaining_due: Money = Field(ZERO, alias="remainingDue")

    model_config = {"populate_by_name": True}

    @field_validator("total_paid", "remaining_due", mode="before")
    @classmethod
    def none_to_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("phone", mode="before")
    @classmethod
    def none_to_blank(cls, v: Any) -> Any:
        return "" if v is None else v


class CreditAccount(BaseModel):
    """
    Per-customer credit standing

    Derived from sale history (or from the backend's customer record for
    permanent customers) each time sales are fetched; never persisted.
    """

    customer_key: str
    name: str = ""
    phone: str = ""
    total_billed: Money = ZERO
    total_paid: Money = ZERO
    remaining_due: Money = ZERO
    last_sale_at: Optional[datetime] = None
    sales: Tuple[SaleRecord, ...] = ()

    model_config = {"frozen": True}

    @property
    def status(self) -> Literal["paid", "unpaid"]:
        if self.remaining_due == 0 and self.total_paid > 0:
            return "paid"
        return "unpaid"

    @property
    def sale_count(self) -> int:
        return len(self.sales)


class CreditPayment(BaseModel):
    """Payment recorded against a permanent customer's balance"""

    amount: Money = Field(..., gt=0)
    method: PaymentMethod = PaymentMethod.CASH
    detail: str = "Payment recorded"
    date: datetime
    sale_id: Optional[str] = Field(None, alias="saleId")

    model_config = {"populate_by_name": True}

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class SaleAllocation(BaseModel):
    """New paid/remaining figures for one sale after a temporary-credit payment"""

    sale_id: str
    applied: Money
    paid_amount: Money
    remaining_due: Money

    model_config = {"frozen": True}


class StatementLine(BaseModel):
    """One merged item row of a consolidated credit statement"""

    name: str
    quantity: int
    price: Money
    total: Money

    model_config = {"frozen": True}


class CreditStatement(BaseModel):
    """Consolidated credit statement for a date range"""

    lines: List[StatementLine]
    receipt_count: int
    period_total: Money
    recovered: Money
    remaining_due: Money
    date_from: Optional[date] = None
    date_to: Optional[date] = None
