"""
Vector Search Tool

This module implements the tool `search-product-vector`, which performs a
semantic search against the FAISS product index.

Responsibilities
----------------
- Embed the product name and search the index
- Filter hits by vehicle brand, model and optional variant
- Convert every failure (embedding service, index) into a zero-result
  response with an explanatory text
"""

from __future__ import annotations

import logging

from ..api.models import ToolResponse, VectorSearchArgs
from ..core.errors import classify_exception
from ..matching.models import CatalogMatch, SearchError, SearchOutcome
from ..matching.vector import VectorMatchEngine
from .responses import render_outcome

logger = logging.getLogger("mcp.tools")


async def tool_vector_search(
    args: VectorSearchArgs,
    engine: VectorMatchEngine,
) -> ToolResponse:
    """
    Semantic product search. Never raises.

    Unlike the catalog search this path has no model/variant disambiguation
    and no display cap: every hit surviving the fitment filter is returned.
    """
    outcome: SearchOutcome
    try:
        products = await engine.match(
            name=args.name,
            brand=args.vehicle_brand,
            model=args.vehicle_model,
            variant=args.vehicle_variant,
        )
        outcome = CatalogMatch(query=args.name, products=products)
    except Exception as exc:
        logger.exception("Vector search failed for %r", args.name)
        outcome = SearchError(
            query=args.name,
            kind=classify_exception(exc),
            message=str(exc) or type(exc).__name__,
            source="Vector search",
        )

    return render_outcome(outcome)
