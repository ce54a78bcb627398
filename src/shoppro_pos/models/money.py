"""Currency amounts"""

from decimal import Decimal, InvalidOperation
from typing import Annotated, Any

from pydantic import PlainSerializer


ZERO = Decimal("0")

# Decimal inside the engine, plain JSON number on the wire
Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


def to_decimal(value: Any) -> Decimal:
    """
    Coerce operator input to a Decimal

    Anything that is not a finite number (None, blank strings, "abc",
    NaN) becomes zero.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            return ZERO
    if not result.is_finite():
        return ZERO
    return result
