"""
Shopware Data Models

Structured payloads returned by the order and product-number tools, plus the
mapping from raw Admin API entities to those payloads.

Raw entities are plain dicts as decoded from JSON. Associations that were not
requested (or are empty) are simply absent, so every lookup here tolerates
missing keys.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


_PAYLOAD_CONFIG = ConfigDict(populate_by_name=True, extra="forbid")


# ---------------------------------------------------------------------
# Product Payloads
# ---------------------------------------------------------------------

class CatalogProduct(BaseModel):
    product_number: str = Field(..., alias="productNumber")
    name: str
    description: Optional[str] = None
    available_stock: Optional[int] = Field(default=None, alias="availableStock")

    model_config = _PAYLOAD_CONFIG


class ProductNumberPayload(BaseModel):
    total: int = Field(..., ge=0)
    products: List[CatalogProduct] = Field(default_factory=list)

    model_config = _PAYLOAD_CONFIG


class StockLevelPayload(BaseModel):
    product_number: str = Field(..., alias="productNumber")
    available_stock: Optional[int] = Field(..., alias="availableStock")

    model_config = _PAYLOAD_CONFIG


# ---------------------------------------------------------------------
# Order Payloads
# ---------------------------------------------------------------------

class OrderCustomer(BaseModel):
    order_number: str = Field(..., alias="orderNumber")
    order_date_time: str = Field(..., alias="orderDateTime")
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    email: Optional[str] = None
    customer_number: Optional[str] = Field(default=None, alias="customerNumber")
    sales_channel: Optional[str] = Field(default=None, alias="salesChannel")

    model_config = _PAYLOAD_CONFIG


class OrderStatus(BaseModel):
    overall: Optional[str] = None
    payment: Optional[str] = None
    shipping: Optional[str] = None

    model_config = _PAYLOAD_CONFIG


class ShippingAddress(BaseModel):
    street: Optional[str] = None
    zipcode: Optional[str] = None
    city: Optional[str] = None
    company: Optional[str] = None
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    country: Optional[str] = None

    model_config = _PAYLOAD_CONFIG


class ShippingMethod(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None

    model_config = _PAYLOAD_CONFIG


class OrderShipping(BaseModel):
    address: Optional[ShippingAddress] = None
    tracking_codes: List[str] = Field(default_factory=list, alias="trackingCodes")
    shipping_method: ShippingMethod = Field(
        default_factory=ShippingMethod, alias="shippingMethod"
    )

    model_config = _PAYLOAD_CONFIG


class OrderItem(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    product_number: Optional[str] = Field(default=None, alias="productNumber")
    quantity: int = 0
    total_price: float = Field(default=0.0, alias="totalPrice")

    model_config = _PAYLOAD_CONFIG


class OrderTotals(BaseModel):
    amount_total: Optional[float] = Field(default=None, alias="amountTotal")
    shipping_total: Optional[float] = Field(default=None, alias="shippingTotal")
    payment_method: Optional[str] = Field(default=None, alias="paymentMethod")

    model_config = _PAYLOAD_CONFIG


class OrderEssentials(BaseModel):
    """
    The parts of an order a support conversation needs.
    """
    customer: OrderCustomer
    status: OrderStatus
    shipping: OrderShipping
    items: List[OrderItem] = Field(default_factory=list)
    totals: OrderTotals

    model_config = _PAYLOAD_CONFIG


class OrderListPayload(BaseModel):
    total: int = Field(..., ge=0)
    orders: List[OrderEssentials] = Field(default_factory=list)

    model_config = _PAYLOAD_CONFIG


class OrderStatusPayload(BaseModel):
    order_number: str = Field(..., alias="orderNumber")
    status_text: str = Field(..., alias="statusText")
    delivery_estimate: Optional[str] = Field(..., alias="deliveryEstimate")

    model_config = _PAYLOAD_CONFIG


class PaymentStatusPayload(BaseModel):
    order_number: str = Field(..., alias="orderNumber")
    payment_status_text: str = Field(..., alias="paymentStatusText")
    payment_method: Optional[str] = Field(..., alias="paymentMethod")

    model_config = _PAYLOAD_CONFIG


class OrderLineItem(BaseModel):
    name: Optional[str] = None
    product_number: Optional[str] = Field(default=None, alias="productNumber")
    quantity: int = 0
    total_price: float = Field(default=0.0, alias="totalPrice")

    model_config = _PAYLOAD_CONFIG


class OrderItemsPayload(BaseModel):
    order_number: str = Field(..., alias="orderNumber")
    items: List[OrderLineItem] = Field(default_factory=list)

    model_config = _PAYLOAD_CONFIG


ShopwarePayload = Union[
    ProductNumberPayload,
    StockLevelPayload,
    OrderListPayload,
    OrderStatusPayload,
    PaymentStatusPayload,
    OrderItemsPayload,
]


# ---------------------------------------------------------------------
# Mapping from Admin API entities
# ---------------------------------------------------------------------

_TAG_RE = re.compile(r"<[^>]*>")
_NEWLINE_RE = re.compile(r"\r?\n|\r")
_SPACES_RE = re.compile(r"\s{2,}")


def strip_html(html: Any) -> str:
    """
    Reduce an HTML fragment to a single line of plain text.
    """
    if not isinstance(html, str):
        return ""
    text = _TAG_RE.sub(" ", html)
    text = _NEWLINE_RE.sub(" ", text)
    return _SPACES_RE.sub(" ", text).strip()


def _get(entity: Any, *path: str) -> Any:
    for key in path:
        if not isinstance(entity, dict):
            return None
        entity = entity.get(key)
    return entity


def _first(items: Any) -> Dict[str, Any]:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return {}


def _coalesce(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def search_entities(result: Dict[str, Any]) -> List[Dict[str, Any]]:
    data = result.get("data")
    return [e for e in data if isinstance(e, dict)] if isinstance(data, list) else []


def search_total(result: Dict[str, Any]) -> int:
    total = result.get("total")
    return total if isinstance(total, int) else len(search_entities(result))


def product_name(entity: Dict[str, Any]) -> str:
    return _coalesce(_get(entity, "translated", "name"), entity.get("name"), "")


def available_stock(entity: Dict[str, Any]) -> Optional[int]:
    return _coalesce(entity.get("availableStock"), entity.get("stock"))


def map_catalog_product(entity: Dict[str, Any]) -> CatalogProduct:
    return CatalogProduct(
        product_number=entity.get("productNumber") or "",
        name=product_name(entity),
        description=strip_html(
            _coalesce(_get(entity, "translated", "description"), entity.get("description"))
        ),
        available_stock=available_stock(entity),
    )


def _map_line_item(line_item: Dict[str, Any]) -> OrderItem:
    product = line_item.get("product") or {}
    return OrderItem(
        name=_coalesce(
            _get(product, "translated", "name"), product.get("name"), line_item.get("label")
        ),
        description=strip_html(
            _coalesce(_get(product, "translated", "description"), product.get("description"))
        ),
        product_number=_coalesce(
            product.get("productNumber"),
            _get(line_item, "payload", "productNumber"),
            line_item.get("productId"),
        ),
        quantity=line_item.get("quantity") or 0,
        total_price=line_item.get("totalPrice") or 0.0,
    )


def map_order_essentials(order: Dict[str, Any]) -> OrderEssentials:
    """
    Project a raw order entity (with its associations) onto OrderEssentials.

    Only the first delivery and the first transaction are considered.
    """
    delivery = _first(order.get("deliveries"))
    transaction = _first(order.get("transactions"))
    address = delivery.get("shippingOrderAddress")

    return OrderEssentials(
        customer=OrderCustomer(
            order_number=order.get("orderNumber") or "",
            order_date_time=order.get("orderDateTime") or "",
            first_name=_get(order, "orderCustomer", "firstName"),
            last_name=_get(order, "orderCustomer", "lastName"),
            email=_get(order, "orderCustomer", "email"),
            customer_number=_get(order, "orderCustomer", "customerNumber"),
            sales_channel=_get(order, "salesChannel", "name"),
        ),
        status=OrderStatus(
            overall=_get(order, "stateMachineState", "name"),
            payment=_get(transaction, "stateMachineState", "name"),
            shipping=_get(delivery, "stateMachineState", "name"),
        ),
        shipping=OrderShipping(
            address=ShippingAddress(
                street=address.get("street"),
                zipcode=address.get("zipcode"),
                city=address.get("city"),
                company=address.get("company"),
                phone_number=address.get("phoneNumber"),
                country=_get(address, "country", "name"),
            ) if isinstance(address, dict) else None,
            tracking_codes=delivery.get("trackingCodes") or [],
            shipping_method=ShippingMethod(
                name=_get(delivery, "shippingMethod", "name"),
                description=_get(delivery, "shippingMethod", "description"),
            ),
        ),
        items=[
            _map_line_item(li) for li in order.get("lineItems") or [] if isinstance(li, dict)
        ],
        totals=OrderTotals(
            amount_total=order.get("amountTotal"),
            shipping_total=order.get("shippingTotal"),
            payment_method=_get(transaction, "paymentMethod", "name"),
        ),
    )
