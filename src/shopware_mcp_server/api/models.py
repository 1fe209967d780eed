"""
API Models for the Product Tool Server

This module defines the Pydantic models used for tool arguments, tool results
and HTTP request/response validation.

Design Goals
------------
- Strong typing
- camelCase on the wire, snake_case in Python
- One result contract shared by tool calls and HTTP routes
"""

from __future__ import annotations

from typing import List, Optional, Dict, Any, Literal, Union
from pydantic import BaseModel, Field, ConfigDict, field_validator

from ..catalog.models import ProductView
from ..shopware.models import ShopwarePayload


# ---------------------------------------------------------------------
# Tool Output Contracts (Authoritative)
# ---------------------------------------------------------------------

class MatchResultPayload(BaseModel):
    """
    Machine-readable half of a tool result.

    `total` counts every match; `products` may be truncated by a display cap.
    """
    total: int = Field(..., ge=0)
    products: List[ProductView] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class TextContent(BaseModel):
    """
    Human-readable half of a tool result.
    """
    type: Literal["text"] = "text"
    text: str

    model_config = ConfigDict(extra="forbid")


class ToolResponse(BaseModel):
    """
    Result of every tool: structured payload plus text blocks.

    Every payload model forbids extra keys, so a dumped payload validates
    back into exactly one member of the union.
    """
    structured_content: Union[MatchResultPayload, ShopwarePayload] = Field(
        ..., alias="structuredContent"
    )
    content: List[TextContent] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @property
    def text(self) -> str:
        return "\n".join(block.text for block in self.content)


# ---------------------------------------------------------------------
# Tool Argument Models
# ---------------------------------------------------------------------

class CatalogSearchArgs(BaseModel):
    """
    Arguments of `search-product-catalog`.
    """
    name: str
    limit: Optional[int] = None
    vehicle_brand: Optional[str] = Field(default=None, alias="vehicleBrand")
    vehicle_model: Optional[str] = Field(default=None, alias="vehicleModel")
    vehicle_variant: Optional[str] = Field(default=None, alias="vehicleVariant")
    vehicle_text: Optional[str] = Field(default=None, alias="vehicleText")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @field_validator("limit", mode="before")
    @classmethod
    def _parse_limit(cls, value: Any) -> Optional[int]:
        # Agents send limits as numbers or numeric strings; anything else
        # falls back to the default limit.
        if isinstance(value, bool) or value is None:
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                return None
        return None


class VectorSearchArgs(BaseModel):
    """
    Arguments of `search-product-vector`.
    """
    name: str
    vehicle_brand: str = Field(..., alias="vehicleBrand")
    vehicle_model: str = Field(..., alias="vehicleModel")
    vehicle_variant: Optional[str] = Field(default=None, alias="vehicleVariant")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class ProductNumberArgs(BaseModel):
    """
    Arguments of `search-product-number` and `get-stock-level`.
    """
    product_number: str = Field(..., min_length=1, alias="productNumber")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class OrderSearchArgs(BaseModel):
    """
    Arguments of `search-orders`. Without an order number the most recent
    orders are listed page by page.
    """
    order_number: Optional[str] = Field(default=None, alias="orderNumber")
    page: Optional[int] = Field(default=None, ge=1)
    limit: Optional[int] = Field(default=None, ge=1, le=250)

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class OrderNumberArgs(BaseModel):
    """
    Arguments of the single-order tools.
    """
    order_number: str = Field(..., min_length=1, alias="orderNumber")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


# ---------------------------------------------------------------------
# HTTP Models
# ---------------------------------------------------------------------

class ToolCallRequest(BaseModel):
    """
    Generic tool invocation: tool name plus JSON arguments.
    """
    name: str = Field(..., min_length=1)
    arguments: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"]
    catalog_products: int = Field(..., ge=0)
    vector_index: Dict[str, Any] = Field(default_factory=dict)
