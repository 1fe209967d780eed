from fastapi import APIRouter, Request

from .models import HealthResponse

router = APIRouter(tags=["health"])

@router.get("/health", response_model=HealthResponse)
def health(request: Request) -> HealthResponse:
    catalog = getattr(request.app.state, "catalog", None)
    index = getattr(request.app.state, "vector_index", None)

    vector_stats = index.get_stats() if index is not None else {"status": "not_loaded"}
    healthy = catalog is not None and vector_stats.get("status") == "connected"

    return HealthResponse(
        status="ok" if healthy else "degraded",
        catalog_products=len(catalog) if catalog is not None else 0,
        vector_index=vector_stats,
    )
