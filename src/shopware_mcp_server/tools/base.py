"""
Tool Dispatch Layer

This module defines the central dispatch mechanism for all agent-invoked
tool calls. It enforces:

- Explicit tool allow-listing
- Argument validation before any matching happens
- Dependency injection of the match engines and the Shopware backend
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Callable, Awaitable

from .catalog_tools import tool_search_catalog
from .search_tools import tool_vector_search
from .shopware_tools import (
    tool_check_order_status,
    tool_check_payment_status,
    tool_get_order_items,
    tool_get_stock_level,
    tool_search_orders,
    tool_search_product_number,
)
from .definitions import (
    TOOL_CHECK_ORDER_STATUS,
    TOOL_CHECK_PAYMENT_STATUS,
    TOOL_GET_ORDER_ITEMS,
    TOOL_GET_STOCK_LEVEL,
    TOOL_SEARCH_ORDERS,
    TOOL_SEARCH_PRODUCT_CATALOG,
    TOOL_SEARCH_PRODUCT_NUMBER,
    TOOL_SEARCH_PRODUCT_VECTOR,
)
from ..api.models import (
    CatalogSearchArgs,
    OrderNumberArgs,
    OrderSearchArgs,
    ProductNumberArgs,
    ToolResponse,
    VectorSearchArgs,
)
from ..core.errors import ToolArgumentError
from ..matching.engine import MatchEngine
from ..matching.vector import VectorMatchEngine
from ..shopware.client import ShopwareBackend


# ---------------------------------------------------------------------
# Tool Type Definitions
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class ToolServices:
    """
    Collaborators injected into every tool handler.
    """
    match_engine: MatchEngine
    vector_engine: VectorMatchEngine
    shopware: ShopwareBackend


ToolHandler = Callable[
    [Dict[str, Any], ToolServices],
    Awaitable[ToolResponse],
]


class UnknownToolError(ToolArgumentError):
    """Raised when a tool name is not in the registry."""


# ---------------------------------------------------------------------
# Tool Registry (AUTHORITATIVE)
# ---------------------------------------------------------------------

async def _handle_search_catalog(
    args: Dict[str, Any],
    services: ToolServices,
) -> ToolResponse:
    parsed = CatalogSearchArgs.model_validate(args)
    return await tool_search_catalog(parsed, services.match_engine)


async def _handle_search_vector(
    args: Dict[str, Any],
    services: ToolServices,
) -> ToolResponse:
    parsed = VectorSearchArgs.model_validate(args)
    return await tool_vector_search(parsed, services.vector_engine)


async def _handle_search_product_number(
    args: Dict[str, Any],
    services: ToolServices,
) -> ToolResponse:
    parsed = ProductNumberArgs.model_validate(args)
    return await tool_search_product_number(parsed, services.shopware)


async def _handle_get_stock_level(
    args: Dict[str, Any],
    services: ToolServices,
) -> ToolResponse:
    parsed = ProductNumberArgs.model_validate(args)
    return await tool_get_stock_level(parsed, services.shopware)


async def _handle_search_orders(
    args: Dict[str, Any],
    services: ToolServices,
) -> ToolResponse:
    parsed = OrderSearchArgs.model_validate(args)
    return await tool_search_orders(parsed, services.shopware)


async def _handle_check_order_status(
    args: Dict[str, Any],
    services: ToolServices,
) -> ToolResponse:
    parsed = OrderNumberArgs.model_validate(args)
    return await tool_check_order_status(parsed, services.shopware)


async def _handle_check_payment_status(
    args: Dict[str, Any],
    services: ToolServices,
) -> ToolResponse:
    parsed = OrderNumberArgs.model_validate(args)
    return await tool_check_payment_status(parsed, services.shopware)


async def _handle_get_order_items(
    args: Dict[str, Any],
    services: ToolServices,
) -> ToolResponse:
    parsed = OrderNumberArgs.model_validate(args)
    return await tool_get_order_items(parsed, services.shopware)


TOOL_REGISTRY: Dict[str, ToolHandler] = {
    TOOL_SEARCH_PRODUCT_CATALOG: _handle_search_catalog,
    TOOL_SEARCH_PRODUCT_VECTOR: _handle_search_vector,
    TOOL_SEARCH_PRODUCT_NUMBER: _handle_search_product_number,
    TOOL_GET_STOCK_LEVEL: _handle_get_stock_level,
    TOOL_SEARCH_ORDERS: _handle_search_orders,
    TOOL_CHECK_ORDER_STATUS: _handle_check_order_status,
    TOOL_CHECK_PAYMENT_STATUS: _handle_check_payment_status,
    TOOL_GET_ORDER_ITEMS: _handle_get_order_items,
}


# ---------------------------------------------------------------------
# Public Dispatch API
# ---------------------------------------------------------------------

async def dispatch_tool_call(
    tool_name: str,
    args: Dict[str, Any],
    services: ToolServices,
) -> ToolResponse:
    """
    Dispatch a tool call requested by the agent.

    Parameters
    ----------
    tool_name : str
        The symbolic tool name requested by the agent.

    args : Dict[str, Any]
        Parsed JSON arguments for the tool.

    services : ToolServices
        Match engines and Shopware backend (injected).

    Returns
    -------
    ToolResponse
        Structured payload plus text content.

    Raises
    ------
    UnknownToolError
        If the tool name is not registered.
    ValidationError
        If the arguments do not match the tool's schema.
    """

    handler = TOOL_REGISTRY.get(tool_name)
    if not handler:
        raise UnknownToolError(f"Unknown tool requested: {tool_name}")

    if not isinstance(args, dict):
        raise ToolArgumentError(f"Arguments for {tool_name} must be an object.")

    return await handler(args, services)

