"""
LLM Tool Definitions

This module defines the authoritative tool/function schemas exposed to the
agent. These definitions must remain strictly synchronized with:

- tools/base.py (TOOL_REGISTRY)
- api/models.py (argument models)
- shopware/models.py (backend tool payloads)
"""

from __future__ import annotations

from typing import Dict, List, Any, Final


# ---------------------------------------------------------------------
# Tool Name Constants (Single Source of Truth)
# ---------------------------------------------------------------------

TOOL_SEARCH_PRODUCT_CATALOG: Final[str] = "search-product-catalog"
TOOL_SEARCH_PRODUCT_VECTOR: Final[str] = "search-product-vector"
TOOL_SEARCH_PRODUCT_NUMBER: Final[str] = "search-product-number"
TOOL_GET_STOCK_LEVEL: Final[str] = "get-stock-level"
TOOL_SEARCH_ORDERS: Final[str] = "search-orders"
TOOL_CHECK_ORDER_STATUS: Final[str] = "check-order-status"
TOOL_CHECK_PAYMENT_STATUS: Final[str] = "check-payment-status"
TOOL_GET_ORDER_ITEMS: Final[str] = "get-order-items"


_PRODUCT_OUTPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "total": {"type": "integer"},
        "products": {
            "type": "array",
            "description": "List of matching products with vehicle details",
            "items": {
                "type": "object",
                "properties": {
                    "productNumber": {"type": "string"},
                    "name": {"type": "string"},
                    "vehicleBrand": {"type": "string"},
                    "vehicleModel": {"type": "string"},
                    "vehicleVariant": {"type": "string"},
                },
                "required": [
                    "productNumber",
                    "name",
                    "vehicleBrand",
                    "vehicleModel",
                    "vehicleVariant",
                ],
            },
        },
    },
    "required": ["total", "products"],
}


# ---------------------------------------------------------------------
# Shopware Backend Tool Helpers
# ---------------------------------------------------------------------

_PRODUCT_NUMBER_PARAMETERS: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "productNumber": {
            "type": "string",
            "description": "The product number (SKU).",
        },
    },
    "required": ["productNumber"],
    "additionalProperties": False,
}

_ORDER_NUMBER_PARAMETERS: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "orderNumber": {
            "type": "string",
            "description": "The order number.",
        },
    },
    "required": ["orderNumber"],
    "additionalProperties": False,
}


def _function(
    name: str,
    title: str,
    description: str,
    parameters: Dict[str, Any],
    output_schema: Dict[str, Any],
) -> Dict[str, Any]:
    return {
        "type": "function",
        "function": {
            "name": name,
            "title": title,
            "description": description,
            "parameters": parameters,
            "outputSchema": output_schema,
        },
    }


# ---------------------------------------------------------------------
# Tool Definitions
# ---------------------------------------------------------------------

TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "type": "function",
        "function": {
            "name": TOOL_SEARCH_PRODUCT_CATALOG,
            "title": "Search product by name",
            "description": (
                "Search over product names from the catalog. Accepts either structured "
                "vehicle parameters or a single vehicleText to parse automatically. "
                "When the vehicle is ambiguous the reply asks for the model or variant "
                "instead of listing products."
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "name": {
                        "type": "string",
                        "description": "Partial or full product name.",
                    },
                    "limit": {
                        "type": "integer",
                        "description": "Maximum results to return.",
                        "minimum": 1,
                        "maximum": 100,
                        "default": 20,
                    },
                    "vehicleBrand": {
                        "type": "string",
                        "description": "Vehicle brand to filter results.",
                    },
                    "vehicleModel": {
                        "type": "string",
                        "description": "Vehicle model to filter results.",
                    },
                    "vehicleVariant": {
                        "type": "string",
                        "description": (
                            "Vehicle variant to filter results. Use 'base variant' "
                            "for the standard trim."
                        ),
                    },
                    "vehicleText": {
                        "type": "string",
                        "description": (
                            "Full vehicle description (e.g., 'citroen c5 limousine'); "
                            "parsed into brand, model and variant."
                        ),
                    },
                },
                "required": ["name"],
                "additionalProperties": False,
            },
            "outputSchema": _PRODUCT_OUTPUT_SCHEMA,
        },
    },
    {
        "type": "function",
        "function": {
            "name": TOOL_SEARCH_PRODUCT_VECTOR,
            "title": "Search product by name (vector)",
            "description": (
                "Fuzzy semantic search over product names, filtered by vehicle brand, "
                "model and optional variant."
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "name": {
                        "type": "string",
                        "description": "Partial or full product name.",
                    },
                    "vehicleBrand": {
                        "type": "string",
                        "description": "Vehicle brand to filter results.",
                    },
                    "vehicleModel": {
                        "type": "string",
                        "description": "Vehicle model to filter results.",
                    },
                    "vehicleVariant": {
                        "type": "string",
                        "description": "Vehicle variant to filter results.",
                    },
                },
                "required": ["name", "vehicleBrand", "vehicleModel"],
                "additionalProperties": False,
            },
            "outputSchema": _PRODUCT_OUTPUT_SCHEMA,
        },
    },
    _function(
        TOOL_SEARCH_PRODUCT_NUMBER,
        "Search product by number",
        "Search for a product by its product number (SKU) in the shop backend.",
        _PRODUCT_NUMBER_PARAMETERS,
        {
            "type": "object",
            "properties": {
                "total": {"type": "integer"},
                "products": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "productNumber": {"type": "string"},
                            "name": {"type": "string"},
                            "description": {"type": ["string", "null"]},
                            "availableStock": {"type": ["integer", "null"]},
                        },
                        "required": ["productNumber", "name"],
                    },
                },
            },
            "required": ["total", "products"],
        },
    ),
    _function(
        TOOL_GET_STOCK_LEVEL,
        "Get stock level",
        "Return the available stock for a product identified by its product number.",
        _PRODUCT_NUMBER_PARAMETERS,
        {
            "type": "object",
            "properties": {
                "productNumber": {"type": "string"},
                "availableStock": {"type": ["integer", "null"]},
            },
            "required": ["productNumber", "availableStock"],
        },
    ),
    _function(
        TOOL_SEARCH_ORDERS,
        "Search orders",
        "Find an order by number or list recent ones.",
        {
            "type": "object",
            "properties": {
                "orderNumber": {
                    "type": "string",
                    "description": "Exact order number to look up.",
                },
                "page": {"type": "integer", "minimum": 1, "default": 1},
                "limit": {"type": "integer", "minimum": 1, "maximum": 250, "default": 10},
            },
            "additionalProperties": False,
        },
        {
            "type": "object",
            "properties": {
                "total": {"type": "integer"},
                "orders": {"type": "array", "items": {"type": "object"}},
            },
            "required": ["total", "orders"],
        },
    ),
    _function(
        TOOL_CHECK_ORDER_STATUS,
        "Check order status",
        "Return a customer-friendly order status and delivery estimate for an order number.",
        _ORDER_NUMBER_PARAMETERS,
        {
            "type": "object",
            "properties": {
                "orderNumber": {"type": "string"},
                "statusText": {"type": "string"},
                "deliveryEstimate": {"type": ["string", "null"]},
            },
            "required": ["orderNumber", "statusText", "deliveryEstimate"],
        },
    ),
    _function(
        TOOL_CHECK_PAYMENT_STATUS,
        "Check payment status",
        "Return a customer-friendly payment status for an order number.",
        _ORDER_NUMBER_PARAMETERS,
        {
            "type": "object",
            "properties": {
                "orderNumber": {"type": "string"},
                "paymentStatusText": {"type": "string"},
                "paymentMethod": {"type": ["string", "null"]},
            },
            "required": ["orderNumber", "paymentStatusText", "paymentMethod"],
        },
    ),
    _function(
        TOOL_GET_ORDER_ITEMS,
        "Get order items",
        "Return the items (name, SKU, quantity, price) of an order.",
        _ORDER_NUMBER_PARAMETERS,
        {
            "type": "object",
            "properties": {
                "orderNumber": {"type": "string"},
                "items": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "name": {"type": ["string", "null"]},
                            "productNumber": {"type": ["string", "null"]},
                            "quantity": {"type": "integer"},
                            "totalPrice": {"type": "number"},
                        },
                    },
                },
            },
            "required": ["orderNumber", "items"],
        },
    ),
]
