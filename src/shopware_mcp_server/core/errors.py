"""
Error Taxonomy and Global Handlers

This module defines the error kinds shared by the matching core and the
application-wide exception handlers of the HTTP layer.

Error Kinds
-----------
- configuration : catalog source missing or malformed (startup only, fatal)
- upstream      : embedding service, vector index or Shopware API failed (per request)
- validation    : malformed tool arguments (rejected before matching)
- internal      : anything else caught at a tool boundary

Component-specific exceptions live next to their components
(`CatalogLoadError`, `EmbeddingError`, `VectorIndexError`, `ShopwareError`) and are mapped to
a kind with `classify_exception`.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Any

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

logger = logging.getLogger("mcp.errors")


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    UPSTREAM = "upstream"
    VALIDATION = "validation"
    INTERNAL = "internal"


class ToolArgumentError(ValueError):
    """Raised when a tool call carries malformed or missing arguments."""


def classify_exception(exc: BaseException) -> ErrorKind:
    """
    Map an exception raised below a tool boundary to an ErrorKind.
    """
    # Imported lazily: these modules import settings, which in turn must stay
    # importable without touching the HTTP layer.
    from ..catalog.source import CatalogLoadError
    from ..embeddings.embedder import EmbeddingError
    from ..embeddings.index import VectorIndexError
    from ..shopware.client import ShopwareError

    if isinstance(exc, CatalogLoadError):
        return ErrorKind.CONFIGURATION
    if isinstance(exc, (EmbeddingError, VectorIndexError, ShopwareError)):
        return ErrorKind.UPSTREAM
    if isinstance(exc, (ToolArgumentError, ValidationError)):
        return ErrorKind.VALIDATION
    return ErrorKind.INTERNAL


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def tool_argument_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Reject malformed tool arguments with a 422 before any matching happens.
    """
    logger.info(
        "Rejected tool arguments for %s %s: %s",
        request.method,
        request.url.path,
        exc,
    )

    if isinstance(exc, ValidationError):
        detail = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
    else:
        detail = str(exc)

    return JSONResponse(
        status_code=422,
        content={"error": "invalid_arguments", "detail": detail},
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    Logs the full stack trace internally and returns a generic 500 with no
    internal details.
    """

    # Log full traceback internally (never returned to client)
    logger.exception(
        "Unhandled MCP exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    payload: Dict[str, Any] = {
        "error": "internal_server_error",
        "detail": "Internal server error",
    }

    return JSONResponse(
        status_code=500,
        content=payload,
    )
