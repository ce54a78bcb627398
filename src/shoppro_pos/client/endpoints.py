"""Backend REST endpoints, relative to the configured base URL"""


class Endpoints:
    PRODUCTS = "/api/products"
    SHOP_SETTINGS = "/api/settings/shop"
    SALE = "/api/sales"
    TEMPORARY_SALES = "/api/sales/temporary"
    PERMANENT = "/api/customers/permanent"

    @staticmethod
    def sale_by_id(sale_id: str) -> str:
        return f"/api/sales/{sale_id}"

    @staticmethod
    def customer_sales(customer_id: str) -> str:
        return f"/api/customers/{customer_id}/sales"

    @staticmethod
    def customer_payment(customer_id: str) -> str:
        return f"/api/customers/{customer_id}/payments"
