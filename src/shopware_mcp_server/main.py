"""
Product Tool Server Application Entry Point

This module defines the FastAPI application instance, registers all routers,
configures global exception handling, and provides a test-friendly
application factory.

Design Goals
------------
- Deterministic startup: the catalog snapshot is loaded before the first
  request, and a missing or malformed catalog aborts startup
- Centralized router registration
- Global exception safety net
- Test-friendly via create_app()
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from pydantic import ValidationError

from .config import settings
from .core.errors import (
    ToolArgumentError,
    tool_argument_exception_handler,
    unhandled_exception_handler,
)
from .catalog.index import CatalogIndex
from .catalog.source import CsvCatalogSource
from .embeddings.index import ProductVectorIndex, VectorIndexError

from .api import (
    health_routes,
    search_routes,
    tool_routes,
)


logger = logging.getLogger("mcp.app")


# ---------------------------------------------------------------------
# Application Factory (Test-Friendly)
# ---------------------------------------------------------------------

def create_app(
    catalog: Optional[CatalogIndex] = None,
    vector_index: Optional[ProductVectorIndex] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Parameters
    ----------
    catalog : Optional[CatalogIndex]
        Pre-built catalog snapshot. When omitted the catalog is loaded from
        settings.catalog_csv_path at startup.

    vector_index : Optional[ProductVectorIndex]
        Pre-built vector index. When omitted the index is loaded from
        settings.vector_index_path at startup.

    Returns
    -------
    FastAPI
        Fully configured FastAPI application.
    """
    logging.getLogger("mcp").setLevel(settings.log_level.upper())

    app = FastAPI(
        title="shopware-mcp-server",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.state.catalog = catalog
    app.state.vector_index = vector_index

    # --------------------------------------------------------------
    # Global Exception Handling
    # --------------------------------------------------------------

    app.add_exception_handler(ToolArgumentError, tool_argument_exception_handler)
    app.add_exception_handler(ValidationError, tool_argument_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --------------------------------------------------------------
    # Router Registration
    # --------------------------------------------------------------

    app.include_router(health_routes.router)
    app.include_router(tool_routes.router)
    app.include_router(search_routes.router)

    # --------------------------------------------------------------
    # Startup Hook
    # --------------------------------------------------------------

    @app.on_event("startup")
    async def _startup_load() -> None:
        """
        Load the catalog snapshot (fatal on failure) and the vector index
        (non-fatal: vector searches report the missing index per request).
        """
        logger.info("Starting shopware-mcp-server")

        if not settings.openai_api_key.get_secret_value():
            logger.warning("OPENAI_API_KEY is not set; vector search will fail")

        if not settings.shopware_api_url:
            logger.warning("SHOPWARE_API_URL is not set; order and stock tools will fail")

        if app.state.catalog is None:
            # CatalogLoadError propagates and aborts startup
            source = CsvCatalogSource(settings.catalog_csv_path)
            app.state.catalog = CatalogIndex.from_source(source)

        if app.state.vector_index is None:
            index = ProductVectorIndex()
            try:
                index.load()
            except VectorIndexError:
                logger.exception("Failed to load product vector index")
            app.state.vector_index = index

        logger.info(
            "Catalog ready with %d products; vector index %s",
            len(app.state.catalog),
            app.state.vector_index.get_stats()["status"],
        )

    @app.on_event("shutdown")
    async def _shutdown_cleanup() -> None:
        logger.info("Shutting down shopware-mcp-server")

    return app


# ---------------------------------------------------------------------
# Default Application Instance (for Uvicorn/Gunicorn)
# ---------------------------------------------------------------------

app = create_app()
