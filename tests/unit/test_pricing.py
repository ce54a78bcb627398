"""
Cart Pricing Unit Tests
"""

import random
from decimal import Decimal

import pytest

from shoppro_pos.engine import (
    Catalog,
    add_line,
    add_tender,
    compute_tender_summary,
    compute_totals,
    detect_low_stock,
    remove_tender,
    reset_tenders,
    set_line_field,
    set_line_quantity,
    update_tender,
)
from shoppro_pos.exceptions import StockError, ValidationError
from shoppro_pos.models import CartLine, PaymentMethod, PaymentTender, Product


def line(product_id: str, price, quantity: int = 1, discount="0", stock: int = 100) -> CartLine:
    return CartLine(
        product_id=product_id,
        name=product_id.title(),
        quantity=quantity,
        unit_price=Decimal(str(price)),
        line_discount=Decimal(str(discount)),
        stock_at_add=stock,
    )


@pytest.fixture
def soap() -> Product:
    return Product(_id="p1", name="Soap", salePrice=Decimal("100"), stock=3)


@pytest.fixture
def catalog(soap: Product) -> Catalog:
    return Catalog([soap, Product(_id="p2", name="Rice", salePrice="250", stock=40)])


class TestAddLine:
    """Tests for add_line"""

    def test_adds_new_line(self, soap: Product):
        """Should add a line snapshotting price and stock"""
        cart = add_line((), soap)

        assert len(cart) == 1
        assert cart[0].quantity == 1
        assert cart[0].unit_price == Decimal("100")
        assert cart[0].line_discount == 0
        assert cart[0].stock_at_add == 3

    def test_increments_existing_line(self, soap: Product):
        """Should bump quantity instead of adding a second line"""
        cart = add_line(add_line((), soap), soap)

        assert len(cart) == 1
        assert cart[0].quantity == 2

    def test_rejects_beyond_stock(self, soap: Product):
        """Should refuse a unit beyond stock and name the exact count"""
        cart = add_line(add_line(add_line((), soap), soap), soap)

        with pytest.raises(StockError) as exc_info:
            add_line(cart, soap)

        assert exc_info.value.message == "Only 3 Soap(s) available!"
        assert exc_info.value.available == 3
        assert cart[0].quantity == 3

    def test_rejects_out_of_stock(self):
        """Should refuse a product with no stock"""
        product = Product(_id="p9", name="Tea", salePrice="50", stock=0)

        with pytest.raises(StockError) as exc_info:
            add_line((), product)

        assert exc_info.value.message == "Tea is out of stock!"

    @pytest.mark.parametrize("price", [None, "0"])
    def test_rejects_missing_price(self, price):
        """Should refuse a product without a usable price"""
        product = Product(_id="p9", name="Tea", salePrice=price, stock=5)

        with pytest.raises(ValidationError) as exc_info:
            add_line((), product)

        assert exc_info.value.message == "Price not available"

    def test_does_not_mutate_input(self, soap: Product):
        """Should return a new cart"""
        original = add_line((), soap)
        add_line(original, soap)
        assert original[0].quantity == 1


class TestSetLineField:
    """Tests for set_line_field"""

    def test_sets_unit_price(self):
        """Should replace the operator price"""
        cart = set_line_field((line("a", 100),), "a", "unit_price", "80")
        assert cart[0].unit_price == Decimal("80")

    def test_accepts_wire_names(self):
        """Should accept customPrice and itemDiscount"""
        cart = set_line_field((line("a", 100),), "a", "itemDiscount", "5")
        cart = set_line_field(cart, "a", "customPrice", "90")
        assert cart[0].line_discount == Decimal("5")
        assert cart[0].unit_price == Decimal("90")

    @pytest.mark.parametrize("value", ["abc", "", None])
    def test_non_numeric_becomes_zero(self, value):
        """Should coerce garbage input to zero"""
        cart = set_line_field((line("a", 100),), "a", "line_discount", value)
        assert cart[0].line_discount == 0

    def test_other_lines_untouched(self):
        """Should only edit the matching line"""
        cart = set_line_field((line("a", 100), line("b", 50)), "b", "unit_price", 40)
        assert cart[0].unit_price == Decimal("100")
        assert cart[1].unit_price == Decimal("40")

    def test_unknown_field(self):
        """Should reject fields that are not editable"""
        with pytest.raises(ValidationError):
            set_line_field((line("a", 100),), "a", "quantity", 3)


class TestSetLineQuantity:
    """Tests for set_line_quantity"""

    def test_sets_quantity(self, catalog: Catalog):
        """Should set a quantity within stock"""
        cart = set_line_quantity((line("p2", 250),), "p2", catalog, 10)
        assert cart[0].quantity == 10

    def test_rejects_above_catalog_stock(self, catalog: Catalog):
        """Should check against the catalog, not the snapshot"""
        cart = (line("p1", 100, stock=50),)

        with pytest.raises(StockError) as exc_info:
            set_line_quantity(cart, "p1", catalog, 4)

        assert exc_info.value.message == "Only 3 in stock!"

    def test_falls_back_to_snapshot_stock(self):
        """Should use the stock seen at add time when the catalog lacks the product"""
        with pytest.raises(StockError):
            set_line_quantity((line("x", 10, stock=2),), "x", Catalog([]), 3)

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_removes_line(self, catalog: Catalog, quantity: int):
        """Should drop the line"""
        cart = set_line_quantity((line("p1", 100), line("p2", 250)), "p1", catalog, quantity)
        assert [item.product_id for item in cart] == ["p2"]

    def test_unknown_line_is_noop(self, catalog: Catalog):
        """Should return the cart unchanged"""
        cart = (line("p1", 100),)
        assert set_line_quantity(cart, "zzz", catalog, 2) == cart

    @pytest.mark.parametrize("quantity", [2.7, "1.5", Decimal("0.5")])
    def test_rejects_fractional_quantity(self, catalog: Catalog, quantity):
        """Should refuse part units instead of truncating"""
        cart = (line("p2", 250),)

        with pytest.raises(ValidationError) as exc_info:
            set_line_quantity(cart, "p2", catalog, quantity)

        assert exc_info.value.code == "VAL_QUANTITY"
        assert cart[0].quantity == 1

    def test_accepts_whole_number_input(self, catalog: Catalog):
        """Operator input like "3" or 3.0 is a whole quantity"""
        cart = set_line_quantity((line("p2", 250),), "p2", catalog, "3")
        assert cart[0].quantity == 3
        assert set_line_quantity(cart, "p2", catalog, 4.0)[0].quantity == 4


class TestComputeTotals:
    """Tests for compute_totals"""

    def test_soap_example(self):
        """Two soaps at 100 with 10% off"""
        totals = compute_totals((line("soap", 100, quantity=2),), discount_percent=10)

        assert totals.subtotal == Decimal("200")
        assert totals.discount_amount == Decimal("20")
        assert totals.service_charge == Decimal("20")
        assert totals.tax_amount == Decimal("9")
        assert totals.grand_total == Decimal("209")

    def test_empty_cart(self):
        """Should still carry the service charge"""
        totals = compute_totals(())
        assert totals.subtotal == 0
        assert totals.grand_total == Decimal("20")

    def test_line_discount_per_unit(self):
        """Discount applies per unit"""
        totals = compute_totals((line("a", 100, quantity=3, discount=10),))
        assert totals.subtotal == Decimal("270")

    def test_line_total_never_negative(self):
        """Should clamp a discount larger than the price"""
        totals = compute_totals((line("a", 10, discount=15),))
        assert totals.subtotal == 0

    def test_additive_and_order_independent(self):
        """Subtotal is the sum of line totals in any order"""
        rng = random.Random(7)
        cart = tuple(
            line(
                f"p{i}",
                Decimal(rng.randint(1, 5000)) / 100,
                quantity=rng.randint(1, 9),
                discount=Decimal(rng.randint(0, 300)) / 100,
            )
            for i in range(12)
        )
        shuffled = list(cart)
        rng.shuffle(shuffled)

        expected = sum((item.line_total for item in cart), Decimal("0"))
        assert compute_totals(cart).subtotal == expected
        assert compute_totals(tuple(shuffled)).subtotal == expected

    def test_custom_pricing(self):
        """Should use the configured service charge and tax rate"""
        totals = compute_totals(
            (line("a", 100),), service_charge=Decimal("0"), tax_rate=Decimal("0.16")
        )
        assert totals.grand_total == Decimal("116")


class TestTenders:
    """Tests for tender editing"""

    def test_reset(self):
        """Should start with one blank cash tender"""
        assert reset_tenders() == (PaymentTender(),)

    def test_add(self):
        """Should append a blank tender"""
        tenders = add_tender(reset_tenders(), PaymentMethod.CARD)
        assert len(tenders) == 2
        assert tenders[1].method is PaymentMethod.CARD
        assert tenders[1].amount == 0

    def test_update_amount(self):
        """Should coerce the amount"""
        tenders = update_tender(reset_tenders(), 0, "amount", "150.50")
        assert tenders[0].amount == Decimal("150.50")

    def test_update_negative_amount(self):
        """Should reject a negative amount"""
        with pytest.raises(ValidationError) as exc_info:
            update_tender(reset_tenders(), 0, "amount", "-5")
        assert exc_info.value.message == "Amount cannot be negative"

    def test_update_method(self):
        """Should accept a method value"""
        tenders = update_tender(reset_tenders(), 0, "method", "jazzcash")
        assert tenders[0].method is PaymentMethod.JAZZCASH

    def test_update_unknown_method(self):
        """Should reject an unknown method"""
        with pytest.raises(ValidationError):
            update_tender(reset_tenders(), 0, "method", "cheque")

    def test_update_bad_index(self):
        """Should reject an index outside the list"""
        with pytest.raises(ValidationError):
            update_tender(reset_tenders(), 3, "amount", 1)

    def test_remove(self):
        """Should remove by index"""
        tenders = add_tender(reset_tenders(), PaymentMethod.UPI)
        assert remove_tender(tenders, 0)[0].method is PaymentMethod.UPI

    def test_remove_last(self):
        """Should keep at least one tender"""
        with pytest.raises(ValidationError) as exc_info:
            remove_tender(reset_tenders(), 0)
        assert exc_info.value.code == "VAL_PAYMENTS"


class TestTenderSummary:
    """Tests for compute_tender_summary"""

    @pytest.fixture
    def total(self) -> Decimal:
        return compute_totals((line("soap", 100, quantity=2),), discount_percent=10).grand_total

    def test_exact_payment(self, total: Decimal):
        """209 against 209"""
        summary = compute_tender_summary((PaymentTender(amount=Decimal("209")),), total)

        assert summary.remaining == 0
        assert summary.change_due == 0
        assert summary.is_covered

    def test_overpayment(self, total: Decimal):
        """250 against 209"""
        summary = compute_tender_summary((PaymentTender(amount=Decimal("250")),), total)

        assert summary.balance == Decimal("-41")
        assert summary.change_due == Decimal("41")
        assert summary.remaining == 0

    def test_split_underpayment(self, total: Decimal):
        """Should sum every tender"""
        tenders = (
            PaymentTender(amount=Decimal("100")),
            PaymentTender(method=PaymentMethod.CARD, amount=Decimal("50"), detail="4242"),
        )
        summary = compute_tender_summary(tenders, total)

        assert summary.total_tendered == Decimal("150")
        assert summary.remaining == Decimal("59")
        assert summary.change_due == 0
        assert not summary.is_covered

    @pytest.mark.parametrize("paid", ["0", "100", "209", "300", "1000.75"])
    def test_never_both_outstanding_and_change(self, total: Decimal, paid: str):
        """At most one of remaining and change due is positive"""
        summary = compute_tender_summary((PaymentTender(amount=Decimal(paid)),), total)
        assert not (summary.remaining > 0 and summary.change_due > 0)


class TestDetectLowStock:
    """Tests for detect_low_stock"""

    def test_flags_lines_near_empty(self):
        """Should flag stock left below the threshold"""
        cart = (line("a", 10, quantity=2, stock=6), line("b", 10, quantity=1, stock=50))
        assert detect_low_stock(cart) == ("A",)

    def test_threshold(self):
        """Stock left equal to the threshold is fine"""
        cart = (line("a", 10, quantity=1, stock=6),)
        assert detect_low_stock(cart, threshold=5) == ()
