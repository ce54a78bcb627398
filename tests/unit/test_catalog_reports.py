"""
Catalog and Sales History Unit Tests
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from shoppro_pos.engine import (
    ALL_CATEGORIES,
    Catalog,
    search_sales,
    sort_recent_first,
    summarize_sales,
)
from shoppro_pos.models import Product, SaleRecord
from shoppro_pos.utils import format_money, short_sale_id


class TestCatalog:
    """Tests for Catalog"""

    @pytest.fixture
    def catalog(self) -> Catalog:
        return Catalog([
            Product(_id="p1", name="Lux Soap", salePrice="100", stock=3, category="Toiletries", barcode="8961000"),
            Product(_id="p2", name="Basmati Rice", salePrice="250", stock=40, category="Grocery", sku="RICE-5KG"),
            Product(_id="p3", name="Dove Soap", salePrice="180", stock=0, category="Toiletries"),
        ])

    def test_lookup(self, catalog: Catalog):
        """Should find products by id"""
        assert catalog.get("p2").name == "Basmati Rice"
        assert catalog.get("nope") is None
        assert "p1" in catalog
        assert len(catalog) == 3

    def test_stock_of(self, catalog: Catalog):
        """Unknown products have no stock"""
        assert catalog.stock_of("p1") == 3
        assert catalog.stock_of("nope") == 0

    def test_categories(self, catalog: Catalog):
        """All first, then first-seen order"""
        assert catalog.categories() == [ALL_CATEGORIES, "Toiletries", "Grocery"]

    def test_search_by_name(self, catalog: Catalog):
        """Should match names case-insensitively"""
        assert [p.id for p in catalog.search("soap")] == ["p1", "p3"]

    def test_search_by_codes(self, catalog: Catalog):
        """Should match barcode and SKU"""
        assert [p.id for p in catalog.search("8961")] == ["p1"]
        assert [p.id for p in catalog.search("RICE-5")] == ["p2"]

    def test_search_by_category(self, catalog: Catalog):
        """Should filter by category"""
        assert [p.id for p in catalog.search("", "Grocery")] == ["p2"]
        assert len(catalog.search()) == 3


class TestSalesHistory:
    """Tests for sales summaries"""

    @pytest.fixture
    def now(self) -> datetime:
        return datetime(2024, 5, 15, 18, 0, tzinfo=timezone.utc)

    @pytest.fixture
    def sales(self, now: datetime):
        def sale(sale_id, total, when, **extra):
            data = {"_id": sale_id, "total": total, "createdAt": when}
            data.update(extra)
            return SaleRecord.model_validate(data)

        return [
            sale("aaa111", 100, now - timedelta(hours=2)),
            sale("bbb222", 200, now - timedelta(days=3), customerInfo={"name": "Ali", "phone": "0300"}, saleType="temporary"),
            sale("ccc333", 300, now - timedelta(days=40)),
            sale("ddd444", 50, None, customer={"_id": "c1", "name": "Bilal", "phone": "0311"}, saleType="permanent"),
        ]

    def test_summary(self, sales, now: datetime):
        """Today, this month and all time"""
        summary = summarize_sales(sales, now=now)

        assert summary.today_total == Decimal("100")
        assert summary.today_count == 1
        assert summary.month_total == Decimal("300")
        assert summary.month_count == 2
        assert summary.all_total == Decimal("650")
        assert summary.all_count == 4

    def test_search_by_customer(self, sales):
        """Should match temporary and permanent customers"""
        assert [s.id for s in search_sales(sales, "ali")] == ["bbb222"]
        assert [s.id for s in search_sales(sales, "0311")] == ["ddd444"]

    def test_search_by_id(self, sales):
        """Should match the sale id"""
        assert [s.id for s in search_sales(sales, "CCC")] == ["ccc333"]

    def test_sort_recent_first(self, sales):
        """Undated sales go last"""
        assert [s.id for s in sort_recent_first(sales)] == ["aaa111", "bbb222", "ccc333", "ddd444"]

    def test_date_fallback(self):
        """Should read date when createdAt is absent"""
        sale = SaleRecord.model_validate({"_id": "x", "date": "2024-01-02T03:04:05"})
        assert sale.created_at == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


class TestFormatting:
    """Tests for display helpers"""

    def test_format_money(self):
        """Should round half up and group thousands"""
        assert format_money("1234.565") == "RS1,234.57"
        assert format_money(Decimal("209.00"), places=0) == "RS209"
        assert format_money(5, symbol="$") == "$5.00"

    def test_short_sale_id(self):
        """Last six characters upper-cased"""
        assert short_sale_id("665f1c2ab7e4d9f0a1b2c3d4") == "B2C3D4"
