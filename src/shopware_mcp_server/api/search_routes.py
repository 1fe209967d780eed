"""
Search Routes

Direct HTTP access to the two product searches. The responses are the same
`ToolResponse` objects the tool-calling layer returns.
"""

from fastapi import APIRouter, Depends, status
from typing import Annotated

from .models import CatalogSearchArgs, ToolResponse, VectorSearchArgs
from ..matching.engine import MatchEngine
from ..matching.vector import VectorMatchEngine
from ..tools.catalog_tools import tool_search_catalog
from ..tools.search_tools import tool_vector_search
from .dependencies import get_match_engine, get_vector_engine

router = APIRouter(prefix="/search", tags=["search"])


@router.post(
    "/catalog",
    response_model=ToolResponse,
    summary="Catalog product search with vehicle disambiguation",
    status_code=status.HTTP_200_OK,
)
async def search_catalog(
    req: CatalogSearchArgs,
    engine: Annotated[MatchEngine, Depends(get_match_engine)],
) -> ToolResponse:
    """
    Match a product name against the catalog for a vehicle.

    Returns products, a model/variant question, or a no-match message.
    """
    return await tool_search_catalog(req, engine)


@router.post(
    "/vector",
    response_model=ToolResponse,
    summary="Vector-based semantic product search",
    status_code=status.HTTP_200_OK,
)
async def search_vector(
    req: VectorSearchArgs,
    engine: Annotated[VectorMatchEngine, Depends(get_vector_engine)],
) -> ToolResponse:
    """
    Semantic product search filtered by vehicle.

    Upstream failures are reported in the text content with a 200 status.
    """
    return await tool_vector_search(req, engine)
