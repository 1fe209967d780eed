from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from ..catalog.index import CatalogIndex
from ..config import settings
from ..embeddings.embedder import Embedder
from ..embeddings.index import ProductVectorIndex
from ..matching.engine import MatchEngine
from ..matching.vector import VectorMatchEngine
from ..shopware.client import ShopwareBackend, ShopwareClient
from ..tools.base import ToolServices


def get_catalog_index(request: Request) -> CatalogIndex:
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        # Startup failed to load or was skipped; refuse rather than match
        # against an empty catalog.
        raise RuntimeError("Product catalog is not loaded.")
    return catalog


def get_vector_index(request: Request) -> ProductVectorIndex:
    index = getattr(request.app.state, "vector_index", None)
    if index is None:
        # Startup installs an index even when no file was found
        raise RuntimeError("Product vector index is not initialised.")
    return index


@lru_cache
def get_embedder() -> Embedder:
    return Embedder()


@lru_cache
def get_shopware_client() -> ShopwareBackend:
    return ShopwareClient()


def get_match_engine(
    catalog: Annotated[CatalogIndex, Depends(get_catalog_index)],
) -> MatchEngine:
    return MatchEngine(catalog)


def get_vector_engine(
    embedder: Annotated[Embedder, Depends(get_embedder)],
    index: Annotated[ProductVectorIndex, Depends(get_vector_index)],
) -> VectorMatchEngine:
    return VectorMatchEngine(embedder, index, k=settings.vector_search_k)


def get_tool_services(
    match_engine: Annotated[MatchEngine, Depends(get_match_engine)],
    vector_engine: Annotated[VectorMatchEngine, Depends(get_vector_engine)],
    shopware: Annotated[ShopwareBackend, Depends(get_shopware_client)],
) -> ToolServices:
    return ToolServices(
        match_engine=match_engine,
        vector_engine=vector_engine,
        shopware=shopware,
    )
