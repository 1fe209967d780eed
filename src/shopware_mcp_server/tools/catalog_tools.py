"""
Catalog Search Tool

This module implements the tool `search-product-catalog`, which matches a
product name against the in-memory catalog for a given vehicle.

Responsibilities
----------------
- Resolve brand/model/variant from structured fields or free vehicle text
- Run the match engine (filters + model/variant disambiguation)
- Render the outcome with the caller's display limit
"""

from __future__ import annotations

import logging

from ..api.models import CatalogSearchArgs, ToolResponse
from ..core.errors import classify_exception
from ..matching.engine import MatchEngine
from ..matching.fitment import resolve_fitment
from ..matching.models import SearchError, SearchOutcome
from .responses import clamp_limit, render_outcome

logger = logging.getLogger("mcp.tools")


async def tool_search_catalog(
    args: CatalogSearchArgs,
    engine: MatchEngine,
) -> ToolResponse:
    """
    Search the product catalog by name and vehicle fitment.

    Failures are reported in the text channel with an empty structured
    result; they never propagate to the caller.
    """
    outcome: SearchOutcome
    try:
        fitment = resolve_fitment(
            brand=args.vehicle_brand,
            model=args.vehicle_model,
            variant=args.vehicle_variant,
            vehicle_text=args.vehicle_text,
        )
        outcome = engine.search(args.name, fitment)
    except Exception as exc:
        logger.exception("Catalog search failed for %r", args.name)
        outcome = SearchError(
            query=args.name,
            kind=classify_exception(exc),
            message=str(exc) or type(exc).__name__,
            source="Product search",
        )

    return render_outcome(outcome, limit=clamp_limit(args.limit))
