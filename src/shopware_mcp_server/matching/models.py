"""
Matching Data Models

Inputs and outcomes of the catalog and vector matchers.

A search produces either a `CatalogMatch` (the Ok branch, which also carries
the disambiguation state) or a `SearchError` (the Err branch). Only the
response renderer turns these into user-facing text.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, Field, ConfigDict

from ..catalog.models import ProductView
from ..core.errors import ErrorKind

BASE_VARIANT_LABEL = "base variant"


class MatchQuery(BaseModel):
    """
    Per-request query against the catalog. Never persisted.
    """

    name_terms: Tuple[str, ...] = ()
    brand: Optional[str] = None
    model: Optional[str] = None
    variant: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="forbid")


class MatchState(str, Enum):
    RESOLVED = "resolved"
    MULTI_MODEL = "multi_model"
    MULTI_VARIANT = "multi_variant"


class ModelOption(BaseModel):
    """
    One vehicle model offered to the caller, with its available variants.
    """

    model: str
    variants: List[str] = Field(default_factory=list)
    has_base_variant: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def variant_labels(self) -> List[str]:
        labels = [BASE_VARIANT_LABEL] if self.has_base_variant else []
        return labels + list(self.variants)


class CatalogMatch(BaseModel):
    """
    Successful search outcome.

    `products` holds every match (uncapped); the display cap is applied by the
    renderer. For MULTI_MODEL / MULTI_VARIANT no products are reported and
    `options` lists what the caller has to choose from.
    """

    query: str
    state: MatchState = MatchState.RESOLVED
    products: List[ProductView] = Field(default_factory=list)
    brand: Optional[str] = None
    model: Optional[str] = None
    options: List[ModelOption] = Field(default_factory=list)

    @property
    def total(self) -> int:
        if self.state is not MatchState.RESOLVED:
            return 0
        return len(self.products)


class SearchError(BaseModel):
    """
    Failed search outcome, tagged with the kind of failure.
    """

    query: str
    kind: ErrorKind
    message: str
    source: str = "Product search"


SearchOutcome = Union[CatalogMatch, SearchError]
