"""
Tool Routes

Generic tool-calling surface: lists the available tool definitions and
dispatches `{name, arguments}` invocations through the tool registry.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from typing import Annotated, Any, Dict

from .models import ToolCallRequest, ToolResponse
from .dependencies import get_tool_services
from ..tools.base import ToolServices, UnknownToolError, dispatch_tool_call
from ..tools.definitions import TOOL_DEFINITIONS

router = APIRouter(prefix="/tools", tags=["tools"])


@router.get("", summary="List available tools")
async def list_tools() -> Dict[str, Any]:
    return {"tools": TOOL_DEFINITIONS}


@router.post(
    "/call",
    response_model=ToolResponse,
    summary="Invoke a tool",
)
async def call_tool(
    req: ToolCallRequest,
    services: Annotated[ToolServices, Depends(get_tool_services)],
) -> ToolResponse:
    """
    Invoke a registered tool.

    Unknown tools give 404, malformed arguments 422 (see the argument error
    handler registered in main.py).
    """
    try:
        return await dispatch_tool_call(req.name, req.arguments, services)
    except UnknownToolError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
