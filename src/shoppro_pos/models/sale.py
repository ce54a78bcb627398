"""Sale models"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from shoppro_pos.models.cart import CartLine
from shoppro_pos.models.money import Money, ZERO


class SaleType(str, Enum):
    """How a sale is settled"""
    CASH = "cash"
    PERMANENT = "permanent"
    TEMPORARY = "temporary"

    @property
    def is_credit(self) -> bool:
        return self is not SaleType.CASH


class SaleTotals(BaseModel):
    """Derived cart figures, never stored on their own"""

    subtotal: Money
    discount_percent: Money
    discount_amount: Money
    service_charge: Money
    tax_rate: Money
    tax_amount: Money
    grand_total: Money

    model_config = {"frozen": True}


class TenderSummary(BaseModel):
    """Tendered amount against a grand total"""

    total_tendered: Money
    balance: Money = Field(..., description="grand total minus tendered, may be negative")
    change_due: Money

    model_config = {"frozen": True}

    @property
    def remaining(self) -> Decimal:
        """Outstanding amount for display, never negative"""
        return max(ZERO, self.balance)

    @property
    def is_covered(self) -> bool:
        return self.balance <= 0


class CustomerInfo(BaseModel):
    """Name and phone of an unregistered (temporary credit) customer"""

    name: str = ""
    phone: str = ""

    @field_validator("name", "phone", mode="before")
    @classmethod
    def none_to_blank(cls, v: Any) -> Any:
        return "" if v is None else v


class SaleItem(BaseModel):
    """Outbound sale line"""

    product: str
    name: str
    qty: int
    price: Money
    item_discount: Money = Field(ZERO, alias="itemDiscount")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_cart_line(cls, line: CartLine) -> "SaleItem":
        return cls(
            product=line.product_id,
            name=line.name,
            qty=line.quantity,
            price=line.unit_price,
            item_discount=line.line_discount,
        )


class SalePayload(BaseModel):
    """Sale creation request body"""

    items: List[SaleItem]
    customer: Optional[str] = None
    customer_info: Optional[CustomerInfo] = Field(None, alias="customerInfo")
    sale_type: SaleType = Field(..., alias="saleType")
    payments: List[Any] = Field(default_factory=list)
    paid_amount: Money = Field(ZERO, alias="paidAmount")
    subtotal: Money
    discount_percent: Money = Field(ZERO, alias="discountPercent")
    service_charge: Money = Field(..., alias="serviceCharge")
    tax: Money
    total: Money

    model_config = {"populate_by_name": True}

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class SaleRecordItem(BaseModel):
    """Line of a historical sale"""

    product: Optional[str] = None
    name: str = ""
    qty: int = 0
    price: Money = ZERO
    item_discount: Money = Field(ZERO, alias="itemDiscount")

    model_config = {"populate_by_name": True}

    @field_validator("product", mode="before")
    @classmethod
    def product_ref_to_id(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return v.get("_id") or v.get("id")
        return v

    @field_validator("price", "item_discount", "qty", mode="before")
    @classmethod
    def none_to_zero(cls, v: Any) -> Any:
        return 0 if v is None else v


class SaleRecord(BaseModel):
    """
    A sale as stored by the backend

    ``customer`` arrives either as a bare id or as the populated customer
    document; both are reduced to ``customer_id`` plus, when available,
    ``customer_details``.
    """

    id: str = Field(..., alias="_id")
    sale_type: SaleType = Field(SaleType.CASH, alias="saleType")
    customer_id: Optional[str] = Field(None, alias="customer")
    customer_details: Optional[CustomerInfo] = None
    customer_info: Optional[CustomerInfo] = Field(None, alias="customerInfo")
    items: List[SaleRecordItem] = Field(default_factory=list)
    subtotal: Optional[Money] = None
    total: Money = ZERO
    paid_amount: Money = Field(ZERO, alias="paidAmount")
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    model_config = {"populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def split_populated_customer(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("customer"), dict):
            data = dict(data)
            customer = data.pop("customer")
            data["customer"] = customer.get("_id") or customer.get("id")
            data["customer_details"] = {
                "name": customer.get("name"),
                "phone": customer.get("phone"),
            }
        if isinstance(data, dict) and "createdAt" not in data and "date" in data:
            data = dict(data)
            data["createdAt"] = data["date"]
        return data

    @field_validator("total", "paid_amount", mode="before")
    @classmethod
    def none_to_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def remaining_due(self) -> Decimal:
        return max(ZERO, self.total - self.paid_amount)


class SaleReceipt(BaseModel):
    """Outcome of a completed checkout, used for the receipt view"""

    sale_id: str
    short_id: str
    sale_type: SaleType
    total: Money
    change_due: Money
    items: Tuple[CartLine, ...]
    customer_name: str = ""
    low_stock: Tuple[str, ...] = ()

    model_config = {"frozen": True}
