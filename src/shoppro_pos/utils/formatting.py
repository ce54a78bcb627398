"""Display helpers; the only place amounts get rounded"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from shoppro_pos.models.money import to_decimal


def round_money(amount: Any, places: int = 2) -> Decimal:
    quantum = Decimal(1).scaleb(-places)
    return to_decimal(amount).quantize(quantum, rounding=ROUND_HALF_UP)


def format_money(amount: Any, symbol: str = "RS", places: int = 2) -> str:
    """
    >>> format_money("1234.5")
    'RS1,234.50'
    >>> format_money(209, places=0)
    'RS209'
    """
    return f"{symbol}{round_money(amount, places):,.{places}f}"


def short_sale_id(sale_id: str) -> str:
    """Last six characters, upper-cased, as printed on receipts"""
    return sale_id[-6:].upper()
