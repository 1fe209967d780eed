"""
Vector Match Engine

Semantic product lookup: embeds the product name, asks the vector index for
the nearest catalog rows, then keeps the rows whose brand, model and
(optionally) variant contain the requested values.

Filtering here is a plain case-insensitive substring test without diacritic
folding, and there is no model/variant disambiguation step: whatever
survives the filters is returned in index rank order.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..catalog.models import ProductView
from ..embeddings.embedder import Embedder
from ..embeddings.index import ProductVectorIndex
from .fitment import clean_field

logger = logging.getLogger("mcp.vector")


def _contains(haystack: str, needle: Optional[str]) -> bool:
    if needle is None:
        return True
    return needle.lower() in haystack.lower()


class VectorMatchEngine:
    """
    Matcher backed by an embedding service and a nearest-neighbour index.
    """

    def __init__(
        self,
        embedder: Embedder,
        index: ProductVectorIndex,
        k: Optional[int] = None,
    ) -> None:
        self._embedder = embedder
        self._index = index
        self._k = k

    async def match(
        self,
        name: str,
        brand: Optional[str],
        model: Optional[str],
        variant: Optional[str] = None,
    ) -> List[ProductView]:
        """
        Return the index hits for `name` that fit the given vehicle.

        Raises
        ------
        EmbeddingError
            If the query cannot be embedded.
        VectorIndexError
            If the index is unavailable or the search fails.
        """
        query_embedding = await self._embedder.embed_one(name)
        hits = self._index.search(query_embedding, self._k)

        brand = clean_field(brand)
        model = clean_field(model)
        variant = clean_field(variant)

        products = [
            product.to_view()
            for product, _score in hits
            if _contains(product.vehicle_brand, brand)
            and _contains(product.vehicle_model, model)
            and _contains(product.vehicle_variant, variant)
        ]

        logger.debug(
            "Vector match for %r: %d neighbour(s), %d after fitment filter",
            name,
            len(hits),
            len(products),
        )
        return products
