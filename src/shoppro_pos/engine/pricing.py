"""
Cart pricing and tender reconciliation

Every function takes the prior cart / tender tuple and returns a new one.
A rejected mutation raises and leaves the caller's value as it was.
"""

from decimal import Decimal
from typing import Any, Tuple

from shoppro_pos.config.pos_config import ConfigDefaults
from shoppro_pos.engine.catalog import Catalog
from shoppro_pos.exceptions import StockError, ValidationError
from shoppro_pos.models.cart import Cart, CartLine
from shoppro_pos.models.money import ZERO, to_decimal
from shoppro_pos.models.payment import PaymentMethod, PaymentTender, Tenders
from shoppro_pos.models.product import Product
from shoppro_pos.models.sale import SaleTotals, TenderSummary


HUNDRED = Decimal("100")

# Editable numeric fields of a cart line, by attribute and by wire name
LINE_FIELDS = {
    "unit_price": "unit_price",
    "customPrice": "unit_price",
    "line_discount": "line_discount",
    "itemDiscount": "line_discount",
}


def add_line(cart: Cart, product: Product) -> Cart:
    """
    Add one unit of a product to the cart

    Raises:
        ValidationError: the product has no usable sale price
        StockError: out of stock, or one more unit would exceed stock
    """
    if product.sale_price is None or product.sale_price <= 0:
        raise ValidationError("Price not available", field="price", code="VAL_PRICE")

    if product.stock <= 0:
        raise StockError(
            f"{product.name} is out of stock!", available=0, product_id=product.id
        )

    for index, line in enumerate(cart):
        if line.product_id == product.id:
            if line.quantity + 1 > product.stock:
                raise StockError(
                    f"Only {product.stock} {product.name}(s) available!",
                    available=product.stock,
                    product_id=product.id,
                )
            bumped = line.model_copy(update={"quantity": line.quantity + 1})
            return cart[:index] + (bumped,) + cart[index + 1:]

    line = CartLine(
        product_id=product.id,
        name=product.name,
        quantity=1,
        unit_price=product.sale_price,
        line_discount=ZERO,
        stock_at_add=product.stock,
    )
    return cart + (line,)


def set_line_field(cart: Cart, product_id: str, field: str, value: Any) -> Cart:
    """Replace unit price or per-unit discount; non-numeric input becomes 0"""
    attr = LINE_FIELDS.get(field)
    if attr is None:
        raise ValidationError(f"Unknown cart field: {field}", field=field)

    amount = to_decimal(value)
    return tuple(
        line.model_copy(update={attr: amount}) if line.product_id == product_id else line
        for line in cart
    )


def _whole_quantity(value: Any) -> int:
    amount = to_decimal(value)
    if amount != amount.to_integral_value():
        raise ValidationError(
            "Quantity must be a whole number", field="quantity", code="VAL_QUANTITY"
        )
    return int(amount)


def set_line_quantity(
    cart: Cart, product_id: str, catalog: Catalog, quantity: Any
) -> Cart:
    """
    Set the quantity of a cart line against the catalog's current stock

    A quantity of zero or less removes the line.

    Raises:
        ValidationError: quantity is not a whole number
        StockError: quantity exceeds current stock
    """
    quantity = _whole_quantity(quantity)

    line = next((item for item in cart if item.product_id == product_id), None)
    if line is None:
        return cart

    product = catalog.get(product_id)
    stock = product.stock if product is not None else line.stock_at_add

    if quantity > stock:
        raise StockError(
            f"Only {stock} in stock!", available=stock, product_id=product_id
        )

    if quantity <= 0:
        return tuple(item for item in cart if item.product_id != product_id)

    return tuple(
        item.model_copy(update={"quantity": quantity}) if item.product_id == product_id else item
        for item in cart
    )


def compute_totals(
    cart: Cart,
    discount_percent: Any = 0,
    service_charge: Decimal = ConfigDefaults.SERVICE_CHARGE,
    tax_rate: Decimal = ConfigDefaults.TAX_RATE,
) -> SaleTotals:
    """
    Derive subtotal, discount, tax and grand total

    Tax is charged on the discounted subtotal; the service charge is not
    discounted or taxed. Nothing is rounded here.
    """
    percent = to_decimal(discount_percent)
    subtotal = sum((line.line_total for line in cart), ZERO)
    discount_amount = subtotal * percent / HUNDRED
    tax_amount = (subtotal - discount_amount) * tax_rate
    grand_total = subtotal - discount_amount + service_charge + tax_amount

    return SaleTotals(
        subtotal=subtotal,
        discount_percent=percent,
        discount_amount=discount_amount,
        service_charge=service_charge,
        tax_rate=tax_rate,
        tax_amount=tax_amount,
        grand_total=grand_total,
    )


def reset_tenders() -> Tenders:
    """A single blank cash tender"""
    return (PaymentTender(),)


def add_tender(tenders: Tenders, method: PaymentMethod = PaymentMethod.CASH) -> Tenders:
    return tenders + (PaymentTender(method=method),)


def update_tender(tenders: Tenders, index: int, field: str, value: Any) -> Tenders:
    """
    Edit method, amount or detail of the tender at ``index``

    Raises:
        ValidationError: bad index, unknown method or negative amount
    """
    if not 0 <= index < len(tenders):
        raise ValidationError(f"No payment at position {index + 1}", field="payments")

    if field == "amount":
        new_value: Any = to_decimal(value)
        if new_value < 0:
            raise ValidationError("Amount cannot be negative", field="amount", code="VAL_AMOUNT")
    elif field == "method":
        try:
            new_value = PaymentMethod(value)
        except ValueError:
            raise ValidationError(
                f"Unknown payment method: {value}", field="method"
            ) from None
    elif field == "detail":
        new_value = "" if value is None else str(value)
    else:
        raise ValidationError(f"Unknown payment field: {field}", field=field)

    updated = tenders[index].model_copy(update={field: new_value})
    return tenders[:index] + (updated,) + tenders[index + 1:]


def remove_tender(tenders: Tenders, index: int) -> Tenders:
    """
    Raises:
        ValidationError: removing would leave no tender
    """
    if len(tenders) <= 1:
        raise ValidationError(
            "At least one payment is required", field="payments", code="VAL_PAYMENTS"
        )
    if not 0 <= index < len(tenders):
        raise ValidationError(f"No payment at position {index + 1}", field="payments")
    return tenders[:index] + tenders[index + 1:]


def compute_tender_summary(tenders: Tenders, grand_total: Decimal) -> TenderSummary:
    total_tendered = sum((t.amount for t in tenders), ZERO)
    balance = grand_total - total_tendered
    return TenderSummary(
        total_tendered=total_tendered,
        balance=balance,
        change_due=max(ZERO, -balance),
    )


def detect_low_stock(
    cart: Cart, threshold: int = ConfigDefaults.LOW_STOCK_THRESHOLD
) -> Tuple[str, ...]:
    """Names of products that will be close to running out after this sale"""
    return tuple(
        line.name
        for line in cart
        if line.quantity > 0 and line.stock_at_add - line.quantity < threshold
    )
