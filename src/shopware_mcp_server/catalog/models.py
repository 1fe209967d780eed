"""
Catalog Data Models

This module defines the canonical product record loaded from the catalog
snapshot and the display projection returned to tool callers.

An empty `vehicle_variant` means the base/standard trim of a model.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, ConfigDict


class ProductRecord(BaseModel):
    """
    A single catalog row: one product fitted to one vehicle.

    The product number (SKU) is not unique across fitments; the same part
    appears once per (brand, model, variant) it fits.
    """

    product_number: str = Field(..., description="Product number (SKU).")
    product_name: str = Field(default="", description="Display name of the product.")
    vehicle_brand: str = Field(default="", description="Vehicle brand, e.g. 'VW'.")
    vehicle_model: str = Field(default="", description="Vehicle model, e.g. 'Golf'.")
    vehicle_variant: str = Field(
        default="",
        description="Vehicle trim/variant. Empty for the base variant.",
    )

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    @property
    def is_base_variant(self) -> bool:
        return not self.vehicle_variant.strip()

    def to_view(self) -> "ProductView":
        return ProductView(
            product_number=self.product_number,
            name=self.product_name,
            vehicle_brand=self.vehicle_brand,
            vehicle_model=self.vehicle_model,
            vehicle_variant=self.vehicle_variant,
        )


class ProductView(BaseModel):
    """
    Display-ready projection of a product, serialized with camelCase keys.
    """

    product_number: str = Field(..., alias="productNumber")
    name: str
    vehicle_brand: str = Field(default="", alias="vehicleBrand")
    vehicle_model: str = Field(default="", alias="vehicleModel")
    vehicle_variant: str = Field(default="", alias="vehicleVariant")

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )
