"""
Typed access to the shop backend
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError

from shoppro_pos.client.endpoints import Endpoints
from shoppro_pos.client.http_client import HttpClient, HttpRequestOptions
from shoppro_pos.config.pos_config import PosConfig
from shoppro_pos.exceptions import PosError, ValidationError
from shoppro_pos.models.credit import CreditPayment, Customer
from shoppro_pos.models.product import Product
from shoppro_pos.models.sale import SalePayload, SaleRecord


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class PosClient:
    """
    Shop backend client

    Wraps :class:`HttpClient` and turns JSON documents into models. Every
    method raises :class:`~shoppro_pos.exceptions.PosError` (or a subclass)
    when the backend cannot be reached or rejects the request.

    Example:
        >>> with PosClient(config) as client:
        ...     products = client.list_products()
    """

    def __init__(self, config: PosConfig, http: Optional[HttpClient] = None) -> None:
        self.config = config
        self.http = http or HttpClient(config)

    @staticmethod
    def _as_list(data: Any) -> List[Dict[str, Any]]:
        return data if isinstance(data, list) else []

    @staticmethod
    def _as_dict(data: Any) -> Dict[str, Any]:
        return data if isinstance(data, dict) else {}

    def _parse_records(self, model: Type[ModelT], data: Any) -> List[ModelT]:
        """Parse a list of documents, skipping any the backend got wrong"""
        records = []
        for raw in self._as_list(data):
            try:
                records.append(model.model_validate(raw))
            except ModelValidationError as e:
                ref = raw.get("_id") if isinstance(raw, dict) else None
                logger.warning(
                    "Skipping malformed %s record %s: %d error(s)",
                    model.__name__, ref or "<no id>", e.error_count(),
                )
        return records

    # Catalog

    def list_products(self) -> List[Product]:
        response = self.http.get(Endpoints.PRODUCTS)
        return self._parse_records(Product, response.data)

    def get_shop_settings(self) -> Dict[str, Any]:
        """Shop name, address and phone used on printed receipts"""
        return self._as_dict(self.http.get(Endpoints.SHOP_SETTINGS).data)

    # Sales

    def list_sales(self) -> List[SaleRecord]:
        response = self.http.get(Endpoints.SALE)
        return self._parse_records(SaleRecord, response.data)

    def list_temporary_sales(self) -> List[SaleRecord]:
        response = self.http.get(Endpoints.TEMPORARY_SALES)
        return self._parse_records(SaleRecord, response.data)

    def create_sale(self, payload: SalePayload) -> Dict[str, Any]:
        response = self.http.post(Endpoints.SALE, payload.to_wire())
        return self._as_dict(response.data)

    def update_sale_payment(
        self, sale_id: str, paid_amount: Decimal, remaining_due: Decimal
    ) -> Dict[str, Any]:
        response = self.http.patch(
            Endpoints.sale_by_id(sale_id),
            {"paidAmount": float(paid_amount), "remainingDue": float(remaining_due)},
        )
        return self._as_dict(response.data)

    # Permanent credit customers

    def list_permanent_customers(self) -> List[Customer]:
        response = self.http.get(Endpoints.PERMANENT)
        return self._parse_records(Customer, response.data)

    def create_permanent_customer(self, name: str, phone: str, **fields: Any) -> Customer:
        """
        Register a permanent credit customer

        Raises:
            ValidationError: name or phone missing
        """
        if not name or not name.strip():
            raise ValidationError("Name is required", field="name", code="VAL_NAME")
        if not phone or not phone.strip():
            raise ValidationError("Phone is required", field="phone", code="VAL_PHONE")

        body = {"gender": "male", **fields, "name": name.strip(), "phone": phone.strip()}
        body["creditLimit"] = float(body.get("creditLimit") or self.config.credit_limit_default)

        response = self.http.post(Endpoints.PERMANENT, body)
        try:
            customer = Customer.model_validate(response.data)
        except ModelValidationError as e:
            raise PosError(
                "Invalid customer data from backend", code="API_PARSE", cause=e
            ) from e
        logger.info("Registered permanent customer %s (%s)", customer.name, customer.id)
        return customer

    def list_customer_sales(
        self,
        customer_id: str,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[SaleRecord]:
        params = {}
        if date_from is not None:
            params["from"] = date_from.isoformat()
        if date_to is not None:
            params["to"] = date_to.isoformat()

        response = self.http.get(
            Endpoints.customer_sales(customer_id),
            HttpRequestOptions(params=params or None),
        )
        return self._parse_records(SaleRecord, response.data)

    def record_customer_payment(
        self, customer_id: str, payment: CreditPayment
    ) -> Dict[str, Any]:
        """Returns the customer's updated totals (``totalPaid``, ``remainingDue``)"""
        response = self.http.post(Endpoints.customer_payment(customer_id), payment.to_wire())
        return self._as_dict(response.data)

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "PosClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
