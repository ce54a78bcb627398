"""Cart models"""

from decimal import Decimal
from typing import Tuple

from pydantic import BaseModel, Field

from shoppro_pos.models.money import Money, ZERO


class CartLine(BaseModel):
    """
    One product in an in-progress sale

    A snapshot taken when the product was added. Price and discount are
    editable by the operator afterwards; ``stock_at_add`` is only used for
    the low-stock heuristic.
    """

    product_id: str = Field(..., description="Product ID")
    name: str = Field(..., description="Product name")
    quantity: int = Field(1, ge=1, description="Units being sold")
    unit_price: Money = Field(..., alias="customPrice", description="Operator price per unit")
    line_discount: Money = Field(ZERO, alias="itemDiscount", description="Discount per unit")
    stock_at_add: int = Field(0, description="Stock count when the line was added")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    @property
    def line_total(self) -> Decimal:
        return max(ZERO, (self.unit_price - self.line_discount) * self.quantity)


Cart = Tuple[CartLine, ...]
