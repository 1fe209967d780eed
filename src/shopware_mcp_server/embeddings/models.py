"""
Embedding Data Models

This module defines the metadata stored next to each vector in the product
index. Each instance corresponds to ONE embedding vector and ONE catalog row.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, ConfigDict

from ..catalog.models import ProductRecord, ProductView


class IndexedProduct(BaseModel):
    """
    A catalog row as stored in the vector index.
    """

    product_number: str = Field(..., description="Product number (SKU).")
    product_name: str = Field(default="")
    vehicle_brand: str = Field(default="")
    vehicle_model: str = Field(default="")
    vehicle_variant: str = Field(default="")

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    @classmethod
    def from_record(cls, record: ProductRecord) -> "IndexedProduct":
        return cls(**record.model_dump())

    def embedding_text(self) -> str:
        """
        Text that is embedded for this row at ingestion time.
        """
        return (
            f"{self.product_name} | {self.vehicle_brand} | "
            f"{self.vehicle_model} | {self.vehicle_variant}"
        )

    def to_view(self) -> ProductView:
        return ProductView(
            product_number=self.product_number,
            name=self.product_name,
            vehicle_brand=self.vehicle_brand,
            vehicle_model=self.vehicle_model,
            vehicle_variant=self.vehicle_variant,
        )
