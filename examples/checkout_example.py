"""
Checkout and Credit Examples for the SHOP PRO POS engine
Demonstrates pricing a cart, finalizing a sale and settling credit
"""

import logging

from shoppro_pos import (
    ConfigLoader,
    CreditService,
    CheckoutService,
    PaymentMethod,
    PosClient,
    PosError,
    SaleType,
    ValidationError,
)
from shoppro_pos.engine import Catalog, add_line, add_tender, set_line_quantity, update_tender
from shoppro_pos.utils import format_money


# =============================================================================
# Example 1: Configuration
# =============================================================================

def load_config():
    """
    Load configuration from the environment

    export POS_BASE_URL="http://localhost:5000"
    export POS_API_TOKEN="your-token"
    export POS_TAX_RATE="0.05"
    """
    return ConfigLoader().load(env=True)


# =============================================================================
# Example 2: Cash sale with a split payment
# =============================================================================

def cash_sale_example(client: PosClient) -> None:
    """Price a cart offline, then submit it"""
    catalog = Catalog(client.list_products())
    service = CheckoutService(client)
    state = service.new_state(SaleType.CASH)

    products = catalog.search("soap")
    if not products:
        print("No soap in the catalog")
        return

    soap = products[0]
    try:
        cart = add_line(state.cart, soap)
        cart = set_line_quantity(cart, soap.id, catalog, 2)
    except ValidationError as e:
        print(f"Cannot add {soap.name}: {e.message}")
        return

    state = state.evolve(cart=cart)
    total = state.totals.grand_total

    # Half cash, half card
    tenders = update_tender(state.tenders, 0, "amount", total / 2)
    tenders = add_tender(tenders, PaymentMethod.CARD)
    tenders = update_tender(tenders, 1, "amount", total - total / 2)
    tenders = update_tender(tenders, 1, "detail", "4242")
    state = state.evolve(tenders=tenders)

    print(f"Total: {format_money(total)}  remaining: {format_money(state.tender_summary.remaining)}")

    try:
        result = service.finalize(state)
    except PosError as e:
        print(e.get_description())
        return

    for notice in result.notices:
        print(f"[{notice.kind.value}] {notice.message}")


# =============================================================================
# Example 3: Temporary credit payment
# =============================================================================

def temporary_credit_example(client: PosClient) -> None:
    """Settle part of a walk-in customer's open balance"""
    credit = CreditService(client)

    for account in credit.load_temporary_accounts():
        print(f"{account.name} ({account.phone}): due {format_money(account.remaining_due)}")

    accounts = credit.temporary_accounts
    if not accounts:
        return

    account = accounts[0]
    try:
        updated = credit.record_temporary_payment(account.customer_key, account.remaining_due)
    except PosError as e:
        print(e.message)
        return

    print(f"{updated.name} is now {updated.status}")


# =============================================================================
# Run Examples
# =============================================================================

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    with PosClient(load_config()) as pos:
        print("=== Cash sale ===")
        cash_sale_example(pos)
        print()
        print("=== Temporary credit ===")
        temporary_credit_example(pos)
