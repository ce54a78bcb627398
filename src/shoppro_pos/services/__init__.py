"""Services module initialization"""

from shoppro_pos.services.checkout_service import CheckoutResult, CheckoutService
from shoppro_pos.services.credit_service import CreditService, reconcile

__all__ = [
    "CheckoutResult",
    "CheckoutService",
    "CreditService",
    "reconcile",
]
