"""
Shopware Backend Tools

This module implements the tools that answer from the live Shopware Admin
API rather than the catalog snapshot:

- search-product-number : product details by exact SKU
- get-stock-level       : available stock by exact SKU
- search-orders         : one order by number, or a page of recent orders
- check-order-status    : customer-friendly shipping status
- check-payment-status  : customer-friendly payment status
- get-order-items       : line items of an order

Like the product searches, every tool returns a `ToolResponse` and never
raises: backend failures become an explanatory text next to an empty payload.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..api.models import (
    OrderNumberArgs,
    OrderSearchArgs,
    ProductNumberArgs,
    TextContent,
    ToolResponse,
)
from ..shopware.client import ShopwareBackend
from ..shopware.models import (
    CatalogProduct,
    OrderEssentials,
    OrderItemsPayload,
    OrderLineItem,
    OrderListPayload,
    OrderStatusPayload,
    PaymentStatusPayload,
    ProductNumberPayload,
    ShopwarePayload,
    StockLevelPayload,
    available_stock,
    map_catalog_product,
    map_order_essentials,
    search_entities,
    search_total,
)

logger = logging.getLogger("mcp.tools")


MAX_LISTED = 10
DESCRIPTION_MAX_CHARS = 250

_SHIPPED_STATES = frozenset({
    "partially shipped",
    "shipped",
    "completed",
    "teilversandt",
    "versandt",
    "abgeschlossen",
})

# Shopware state names (English and German storefront labels)
_SHIPPING_STATUS_TEXT: Dict[str, str] = {
    "open": "Your order has been received and is currently being processed.",
    "in progress": "Your order has been received and is currently being processed.",
    **{state: "Good news! Your order has already been shipped." for state in _SHIPPED_STATES},
    "cancelled": "Unfortunately, this order has been cancelled.",
    "storniert": "Unfortunately, this order has been cancelled.",
    "returned": "This order was returned to us.",
    "retour": "This order was returned to us.",
}

_PAYMENT_STATUS_TEXT: Dict[str, str] = {
    **dict.fromkeys(
        ("open", "in_progress", "in progress", "pending", "offen"),
        "Payment is still pending.",
    ),
    **dict.fromkeys(
        ("paid", "completed", "bezahlt", "abgeschlossen"),
        "Payment received. Thank you!",
    ),
    **dict.fromkeys(
        ("cancelled", "canceled", "storniert"),
        "The payment was cancelled.",
    ),
    **dict.fromkeys(
        ("refunded", "re-credited", "erstattet"),
        "The payment was refunded.",
    ),
}

_ORDER_ASSOCIATIONS: Dict[str, Any] = {
    "stateMachineState": {},
    "transactions": {
        "associations": {"stateMachineState": {}, "paymentMethod": {}},
    },
    "deliveries": {
        "associations": {
            "stateMachineState": {},
            "shippingMethod": {},
            "shippingOrderAddress": {"associations": {"country": {}}},
        },
    },
    "orderCustomer": {},
    "salesChannel": {},
    "lineItems": {"associations": {"product": {}}},
}


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def _response(payload: ShopwarePayload, text: str) -> ToolResponse:
    return ToolResponse(structured_content=payload, content=[TextContent(text=text)])


def _failure(source: str, exc: Exception, payload: ShopwarePayload) -> ToolResponse:
    logger.exception("%s failed", source)
    return _response(payload, f"{source} failed: {str(exc) or type(exc).__name__}")


def _order_criteria(order_number: str, associations: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "filter": [{"type": "equals", "field": "orderNumber", "value": order_number}],
        "associations": associations,
    }


def format_amount(value: Any) -> str:
    """Render a price like the Admin API sends it: 20 rather than 20.0."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def shipping_status_text(status: Optional[str]) -> str:
    raw = status or "unknown"
    return _SHIPPING_STATUS_TEXT.get(raw.lower(), f"Current status: {raw}")


def delivery_estimate(status: Optional[str]) -> Optional[str]:
    if status and status.lower() in _SHIPPED_STATES:
        return "Usually delivered within 2–5 business days."
    return None


def payment_status_text(status: Optional[str]) -> str:
    raw = status or "unknown"
    return _PAYMENT_STATUS_TEXT.get(raw.lower(), f"Current payment status: {raw}")


# ---------------------------------------------------------------------
# Product Tools
# ---------------------------------------------------------------------

async def tool_search_product_number(
    args: ProductNumberArgs,
    shopware: ShopwareBackend,
) -> ToolResponse:
    """
    Look up a product by SKU.

    One hit gives a short summary, several hits a numbered shortlist to pick
    from, none a hint to check the number's punctuation.
    """
    number = args.product_number
    try:
        result = await shopware.search_products_by_number(number)
    except Exception as exc:
        return _failure("Product number search", exc, ProductNumberPayload(total=0))

    products = [map_catalog_product(e) for e in search_entities(result)]
    total = search_total(result)

    if total == 0 or not products:
        return _response(
            ProductNumberPayload(total=0, products=[]),
            f'Couldn\'t find any item for "{number}". Could you check the product '
            "number for any missing underscores, hyphens or dots?",
        )

    if total == 1:
        product = products[0]
        description = product.description or ""
        if len(description) > DESCRIPTION_MAX_CHARS:
            description = f"{description[:DESCRIPTION_MAX_CHARS]}…"
        text = f"**{product.name}**" + (f"\n\n{description}" if description else "")
        return _response(ProductNumberPayload(total=total, products=products), text.strip())

    shown = products[:MAX_LISTED]
    shortlist = "\n".join(f"{i}. {p.name}" for i, p in enumerate(shown, start=1))
    more = "\n…and more" if total > len(shown) else ""
    payload = ProductNumberPayload(
        total=total,
        products=[
            CatalogProduct(
                product_number=p.product_number,
                name=p.name,
                available_stock=p.available_stock,
            )
            for p in shown
        ],
    )
    return _response(
        payload,
        f"I found {total} matching products. Which one are you interested in? "
        f"Please reply with the list number (1-{len(shown)}) or the product name, "
        f"and I can show exact details.\n{shortlist}{more}",
    )


async def tool_get_stock_level(
    args: ProductNumberArgs,
    shopware: ShopwareBackend,
) -> ToolResponse:
    number = args.product_number
    empty = StockLevelPayload(product_number=number, available_stock=None)
    try:
        result = await shopware.search_products_by_number(number)
    except Exception as exc:
        return _failure("Stock lookup", exc, empty)

    entities = search_entities(result)
    if search_total(result) == 0 or not entities:
        return _response(empty, f'Product with number "{number}" not found.')

    # Product numbers are unique in Shopware; take the first hit
    stock = available_stock(entities[0])
    payload = StockLevelPayload(product_number=number, available_stock=stock)
    return _response(payload, f"{stock if stock is not None else 'n/a'} units are available.")


# ---------------------------------------------------------------------
# Order Tools
# ---------------------------------------------------------------------

def _order_summary(order_number: str, order: OrderEssentials) -> str:
    address = order.shipping.address
    if address is not None:
        address_line = (
            f"{address.street}, {address.zipcode} {address.city}, {address.country or ''}"
        ).strip()
    else:
        address_line = "n/a"

    tracking = ", ".join(order.shipping.tracking_codes) or "not yet assigned"
    method = order.shipping.shipping_method

    shown = order.items[:MAX_LISTED]
    item_lines = "\n".join(
        f"{it.quantity} × {it.name} (PN: {it.product_number or 'n/a'}) – "
        f"{format_amount(it.total_price)}"
        for it in shown
    )
    more = "\n…and more" if len(order.items) > len(shown) else ""

    return (
        f"Order #{order_number} shipping status: {order.status.shipping or 'n/a'}\n"
        f"Shipping method: {method.name or 'n/a'} – {method.description or ''}\n"
        f"Address: {address_line}\n"
        f"Tracking: {tracking}\n"
        f"Items:\n{item_lines}{more}"
    )


async def tool_search_orders(
    args: OrderSearchArgs,
    shopware: ShopwareBackend,
) -> ToolResponse:
    """
    Find one order by number, or list a page of orders.

    A single order found by number is summarised with its shipping state,
    address, tracking codes and items; everything else becomes a short list.
    """
    number = args.order_number
    if number:
        criteria = _order_criteria(number, _ORDER_ASSOCIATIONS)
    else:
        criteria = {
            "page": args.page or 1,
            "limit": args.limit or 10,
            "associations": _ORDER_ASSOCIATIONS,
        }

    try:
        result = await shopware.search_orders(criteria)
    except Exception as exc:
        return _failure("Order search", exc, OrderListPayload(total=0))

    orders = [map_order_essentials(e) for e in search_entities(result)]
    total = search_total(result)

    if number and total == 0:
        return _response(
            OrderListPayload(total=0, orders=[]),
            f"No order found for number {number}.",
        )

    if number and total == 1 and orders:
        return _response(
            OrderListPayload(total=total, orders=orders),
            _order_summary(number, orders[0]),
        )

    shown = orders[:MAX_LISTED]
    lines = "\n".join(
        f"#{o.customer.order_number} – {o.customer.order_date_time}" for o in shown
    )
    more = "\n…and more" if total > len(shown) else ""
    return _response(
        OrderListPayload(total=total, orders=shown),
        f"Found {total} order(s).\n{lines}{more}\n"
        "Provide an orderNumber to get a specific order.",
    )


async def tool_check_order_status(
    args: OrderNumberArgs,
    shopware: ShopwareBackend,
) -> ToolResponse:
    number = args.order_number
    criteria = _order_criteria(number, {
        "stateMachineState": {},
        "deliveries": _ORDER_ASSOCIATIONS["deliveries"],
    })

    try:
        result = await shopware.search_orders(criteria)
    except Exception as exc:
        return _failure(
            "Order status check",
            exc,
            OrderStatusPayload(order_number=number, status_text="", delivery_estimate=None),
        )

    entities = search_entities(result)
    if search_total(result) == 0 or not entities:
        not_found = f"Order #{number} not found."
        return _response(
            OrderStatusPayload(order_number=number, status_text=not_found, delivery_estimate=None),
            not_found,
        )

    status = map_order_essentials(entities[0]).status
    state = status.shipping or status.overall
    status_text = shipping_status_text(state)
    estimate = delivery_estimate(state)

    text = f"**Order #{number}**\n{status_text}"
    if estimate:
        text += f"\nEstimated delivery: {estimate}"

    return _response(
        OrderStatusPayload(
            order_number=number,
            status_text=status_text,
            delivery_estimate=estimate,
        ),
        text,
    )


async def tool_check_payment_status(
    args: OrderNumberArgs,
    shopware: ShopwareBackend,
) -> ToolResponse:
    number = args.order_number
    criteria = _order_criteria(number, {"transactions": _ORDER_ASSOCIATIONS["transactions"]})

    try:
        result = await shopware.search_orders(criteria)
    except Exception as exc:
        return _failure(
            "Payment status check",
            exc,
            PaymentStatusPayload(order_number=number, payment_status_text="", payment_method=None),
        )

    entities = search_entities(result)
    if search_total(result) == 0 or not entities:
        not_found = f"Order #{number} not found."
        return _response(
            PaymentStatusPayload(
                order_number=number,
                payment_status_text=not_found,
                payment_method=None,
            ),
            not_found,
        )

    order = map_order_essentials(entities[0])
    status_text = payment_status_text(order.status.payment)
    method = order.totals.payment_method

    text = f"**Order #{number}**\n{status_text}"
    if method:
        text += f"\nPayment method: {method}"

    return _response(
        PaymentStatusPayload(
            order_number=number,
            payment_status_text=status_text,
            payment_method=method,
        ),
        text,
    )


async def tool_get_order_items(
    args: OrderNumberArgs,
    shopware: ShopwareBackend,
) -> ToolResponse:
    number = args.order_number
    criteria = _order_criteria(number, {"lineItems": _ORDER_ASSOCIATIONS["lineItems"]})
    empty = OrderItemsPayload(order_number=number, items=[])

    try:
        result = await shopware.search_orders(criteria)
    except Exception as exc:
        return _failure("Order items lookup", exc, empty)

    entities = search_entities(result)
    if search_total(result) == 0 or not entities:
        return _response(empty, f"Order #{number} not found.")

    items = [
        OrderLineItem(
            name=item.name,
            product_number=item.product_number,
            quantity=item.quantity,
            total_price=item.total_price,
        )
        for item in map_order_essentials(entities[0]).items
    ]
    lines = "\n".join(
        f"{it.quantity} × {it.name or 'n/a'} – {format_amount(it.total_price)}" for it in items
    )
    return _response(
        OrderItemsPayload(order_number=number, items=items),
        f"Items for order #{number}:\n{lines}",
    )
