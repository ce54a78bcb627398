"""
Credit Ledger Unit Tests
"""

import random
from datetime import date
from decimal import Decimal

import pytest

from shoppro_pos.engine import (
    account_from_customer,
    aggregate_by_customer,
    allocate_payment,
    apply_payment,
    build_credit_statement,
    build_statement_line_items,
    permanent_identity,
    recovered_in_period,
    temporary_identity,
)
from shoppro_pos.exceptions import ValidationError
from shoppro_pos.models import CreditAccount, Customer, SaleRecord


def temp_sale(sale_id: str, name: str, phone: str, total, paid="0", when="2024-05-01T10:00:00Z", items=()):
    return SaleRecord.model_validate({
        "_id": sale_id,
        "saleType": "temporary",
        "customerInfo": {"name": name, "phone": phone},
        "total": total,
        "paidAmount": paid,
        "createdAt": when,
        "items": list(items),
    })


def perm_sale(sale_id: str, customer, total, paid="0", when="2024-05-01T10:00:00Z", items=()):
    return SaleRecord.model_validate({
        "_id": sale_id,
        "saleType": "permanent",
        "customer": customer,
        "total": total,
        "paidAmount": paid,
        "createdAt": when,
        "items": list(items),
    })


@pytest.fixture
def ali_sales():
    return [
        temp_sale("s1", "Ali", "0300", "500", paid="200", when="2024-05-01T10:00:00Z"),
        temp_sale("s2", "Ali", "0300", "300", when="2024-05-03T10:00:00Z"),
    ]


class TestIdentity:
    """Tests for identity functions"""

    def test_temporary_key(self):
        """Should join name and phone"""
        assert temporary_identity(temp_sale("s", "Ali", "0300", 1)) == "Ali-0300"

    def test_temporary_blank_name(self):
        """Unnamed sales have no identity"""
        assert temporary_identity(temp_sale("s", "  ", "0300", 1)) is None

    def test_temporary_ignores_other_types(self):
        """Should skip permanent sales"""
        assert temporary_identity(perm_sale("s", "c1", 1)) is None

    def test_permanent_populated_customer(self):
        """Should read the id of a populated customer"""
        sale = perm_sale("s", {"_id": "c1", "name": "Bilal", "phone": "0311"}, 1)
        assert permanent_identity(sale) == "c1"
        assert sale.customer_details.name == "Bilal"

    def test_permanent_ignores_other_types(self):
        """Should skip temporary sales"""
        assert permanent_identity(temp_sale("s", "Ali", "0300", 1)) is None

    def test_temporary_key_collision(self):
        """Hyphens in name or phone can join two customers under one key"""
        sales = [temp_sale("s1", "A-B", "", 10), temp_sale("s2", "A", "B-", 20)]

        accounts = aggregate_by_customer(sales, temporary_identity)

        assert list(accounts) == ["A-B-"]
        assert accounts["A-B-"].total_billed == Decimal("30")


class TestAggregateByCustomer:
    """Tests for aggregate_by_customer"""

    def test_two_sales_one_customer(self, ali_sales):
        """500 and 300 with 200 paid"""
        accounts = aggregate_by_customer(ali_sales, temporary_identity)
        account = accounts["Ali-0300"]

        assert account.total_billed == Decimal("800")
        assert account.total_paid == Decimal("200")
        assert account.remaining_due == Decimal("600")
        assert account.status == "unpaid"
        assert account.sale_count == 2
        assert account.name == "Ali"

    def test_same_name_different_phone(self):
        """Should keep two accounts apart"""
        sales = [temp_sale("s1", "Ali", "0300", 10), temp_sale("s2", "Ali", "0301", 10)]
        assert set(aggregate_by_customer(sales, temporary_identity)) == {"Ali-0300", "Ali-0301"}

    def test_paid_status(self):
        """Fully settled accounts with payments are paid"""
        accounts = aggregate_by_customer(
            [temp_sale("s1", "Sara", "1", "100", paid="100")], temporary_identity
        )
        assert accounts["Sara-1"].status == "paid"

    def test_nothing_billed_is_unpaid(self):
        """No payments means unpaid even when nothing is due"""
        accounts = aggregate_by_customer(
            [temp_sale("s1", "Sara", "1", "0")], temporary_identity
        )
        assert accounts["Sara-1"].status == "unpaid"

    def test_overpaid_clamped(self):
        """Remaining due is never negative"""
        accounts = aggregate_by_customer(
            [temp_sale("s1", "Sara", "1", "100", paid="150")], temporary_identity
        )
        assert accounts["Sara-1"].remaining_due == 0

    def test_most_recent_first(self, ali_sales):
        """Accounts come back ordered by last sale"""
        sales = ali_sales + [temp_sale("s3", "Zed", "9", 50, when="2024-06-01T00:00:00Z")]
        assert list(aggregate_by_customer(sales, temporary_identity)) == ["Zed-9", "Ali-0300"]

    def test_sales_kept_oldest_first(self, ali_sales):
        """Member sales are chronological"""
        account = aggregate_by_customer(list(reversed(ali_sales)), temporary_identity)["Ali-0300"]
        assert [s.id for s in account.sales] == ["s1", "s2"]

    def test_idempotent_and_order_independent(self):
        """Shuffled input gives identical accounts"""
        rng = random.Random(11)
        sales = [
            temp_sale(
                f"s{i}",
                rng.choice(["Ali", "Sara", "Omar"]),
                rng.choice(["0300", "0311"]),
                rng.randint(1, 900),
                paid=rng.randint(0, 100),
                when=f"2024-05-{rng.randint(1, 28):02d}T10:00:00Z",
            )
            for i in range(40)
        ]
        first = aggregate_by_customer(sales, temporary_identity)
        again = aggregate_by_customer(sales, temporary_identity)
        rng.shuffle(sales)
        shuffled = aggregate_by_customer(sales, temporary_identity)

        assert first == again
        assert first == shuffled
        assert list(first) == list(shuffled)

    def test_permanent_grouping(self):
        """Permanent sales group by customer id"""
        sales = [
            perm_sale("s1", "c1", 100),
            perm_sale("s2", {"_id": "c1", "name": "Bilal", "phone": "0311"}, 50, when="2024-05-02T00:00:00Z"),
            perm_sale("s3", "c2", 70),
        ]
        accounts = aggregate_by_customer(sales, permanent_identity)

        assert accounts["c1"].total_billed == Decimal("150")
        assert accounts["c1"].name == "Bilal"
        assert accounts["c2"].total_billed == Decimal("70")


class TestAccountFromCustomer:
    """Tests for account_from_customer"""

    def test_figures(self):
        """Billed is paid plus remaining"""
        customer = Customer.model_validate(
            {"_id": "c1", "name": "Bilal", "phone": "0311", "totalPaid": 300, "remainingDue": 700}
        )
        account = account_from_customer(customer)

        assert account.customer_key == "c1"
        assert account.total_billed == Decimal("1000")
        assert account.remaining_due == Decimal("700")


class TestApplyPayment:
    """Tests for apply_payment"""

    @pytest.fixture
    def account(self) -> CreditAccount:
        return CreditAccount(
            customer_key="c1",
            total_billed=Decimal("800"),
            total_paid=Decimal("200"),
            remaining_due=Decimal("600"),
        )

    def test_partial(self, account: CreditAccount):
        """Should move money from due to paid"""
        updated = apply_payment(account, "250")

        assert updated.total_paid == Decimal("450")
        assert updated.remaining_due == Decimal("350")
        assert account.remaining_due == Decimal("600")

    def test_full(self, account: CreditAccount):
        """Paying everything settles the account"""
        updated = apply_payment(account, 600)
        assert updated.remaining_due == 0
        assert updated.status == "paid"

    def test_exceeds_due(self, account: CreditAccount):
        """Should refuse more than what is owed"""
        with pytest.raises(ValidationError) as exc_info:
            apply_payment(account, "600.01")
        assert exc_info.value.message == "Amount exceeds due"

    @pytest.mark.parametrize("amount", ["0", "-10", "abc", None])
    def test_invalid_amount(self, account: CreditAccount, amount):
        """Should refuse non-positive input"""
        with pytest.raises(ValidationError) as exc_info:
            apply_payment(account, amount)
        assert exc_info.value.message == "Enter valid amount"


class TestAllocatePayment:
    """Tests for allocate_payment"""

    def test_oldest_first(self, ali_sales):
        """Should settle the oldest sale before the next"""
        allocations = allocate_payment(ali_sales, Decimal("400"))

        assert [(a.sale_id, a.applied) for a in allocations] == [
            ("s1", Decimal("300")),
            ("s2", Decimal("100")),
        ]
        assert allocations[0].remaining_due == 0
        assert allocations[1].paid_amount == Decimal("100")
        assert allocations[1].remaining_due == Decimal("200")

    def test_skips_settled_sales(self):
        """Paid-up sales get nothing"""
        sales = [
            temp_sale("s1", "Ali", "1", 100, paid=100, when="2024-01-01T00:00:00Z"),
            temp_sale("s2", "Ali", "1", 100, when="2024-02-01T00:00:00Z"),
        ]
        allocations = allocate_payment(sales, Decimal("30"))
        assert [a.sale_id for a in allocations] == ["s2"]

    def test_total_applied_matches_amount(self, ali_sales):
        """Nothing is applied twice"""
        allocations = allocate_payment(ali_sales, Decimal("350"))
        assert sum(a.applied for a in allocations) == Decimal("350")


class TestStatement:
    """Tests for statement building"""

    @pytest.fixture
    def sales(self):
        return [
            perm_sale("s1", "c1", "300", items=[
                {"product": "p1", "name": "Soap", "qty": 2, "price": 100},
                {"product": "p2", "name": "Rice", "qty": 1, "price": 100},
            ]),
            perm_sale("s2", "c1", "150", when="2024-05-02T10:00:00Z", items=[
                {"product": {"_id": "p1"}, "name": "Soap", "qty": 1, "price": 150},
            ]),
        ]

    def test_merges_by_name(self, sales):
        """Same name merges with the first price kept"""
        lines = build_statement_line_items(sales)
        soap = lines[0]

        assert [line.name for line in lines] == ["Soap", "Rice"]
        assert soap.quantity == 3
        assert soap.price == Decimal("100")
        assert soap.total == Decimal("350")

    def test_recovered(self):
        """Billed minus still owed, never negative"""
        assert recovered_in_period(Decimal("450"), Decimal("100")) == Decimal("350")
        assert recovered_in_period(Decimal("100"), Decimal("450")) == 0

    def test_statement(self, sales):
        """Should total the period"""
        statement = build_credit_statement(
            sales, Decimal("200"), date(2024, 5, 1), date(2024, 5, 31)
        )

        assert statement.receipt_count == 2
        assert statement.period_total == Decimal("450")
        assert statement.recovered == Decimal("250")
        assert statement.date_to == date(2024, 5, 31)

    def test_empty_statement(self):
        """Should refuse to print nothing"""
        with pytest.raises(ValidationError) as exc_info:
            build_credit_statement([], Decimal("0"))
        assert exc_info.value.message == "No sales to print"
