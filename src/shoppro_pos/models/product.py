"""Product model"""

from typing import Optional
from pydantic import BaseModel, Field

from shoppro_pos.models.money import Money


class Product(BaseModel):
    """Catalog product as returned by the backend"""

    id: str = Field(..., alias="_id", description="Product ID")
    name: str = Field(..., description="Product name")
    sale_price: Optional[Money] = Field(
        None, alias="salePrice", description="List sale price"
    )
    stock: int = Field(0, description="Units currently in stock")
    category: Optional[str] = Field(None, description="Category name")
    barcode: Optional[str] = Field(None, description="Barcode value")
    sku: Optional[str] = Field(None, description="Stock keeping unit")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }
