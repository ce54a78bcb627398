"""Read-only product catalog"""

from typing import Dict, Iterable, Iterator, List, Optional

from shoppro_pos.models.product import Product


ALL_CATEGORIES = "All"


class Catalog:
    """
    Products by id, as last fetched from the backend

    Cart mutations that need the current stock ceiling take a Catalog
    explicitly instead of reaching for a shared product list.
    """

    def __init__(self, products: Iterable[Product] = ()) -> None:
        self._products: Dict[str, Product] = {p.id: p for p in products}

    def get(self, product_id: str) -> Optional[Product]:
        return self._products.get(product_id)

    def stock_of(self, product_id: str) -> int:
        product = self._products.get(product_id)
        return product.stock if product is not None else 0

    def categories(self) -> List[str]:
        """"All" followed by each distinct category, first-seen order"""
        seen: List[str] = [ALL_CATEGORIES]
        for product in self._products.values():
            if product.category and product.category not in seen:
                seen.append(product.category)
        return seen

    def search(self, query: str = "", category: str = ALL_CATEGORIES) -> List[Product]:
        """Case-insensitive name match, or substring of barcode / SKU"""
        needle = query.lower()
        matches = []
        for product in self._products.values():
            if category != ALL_CATEGORIES and product.category != category:
                continue
            if (
                needle in product.name.lower()
                or (product.barcode is not None and query in product.barcode)
                or (product.sku is not None and query in product.sku)
            ):
                matches.append(product)
        return matches

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._products

    def __iter__(self) -> Iterator[Product]:
        return iter(self._products.values())

    def __len__(self) -> int:
        return len(self._products)
