import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from booking_backend.api.deps import get_session, require_api_key
from booking_backend.api.schemas.tools import CallToolRequest, CallToolResponse, ListToolsResponse
from booking_backend.tools.catalog import tool_registry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/mcp", tags=["tools"], dependencies=[Depends(require_api_key)])


@router.get("/tools", response_model=ListToolsResponse)
async def list_tools() -> ListToolsResponse:
    return ListToolsResponse(tools=tool_registry.describe_all())


@router.post("/tools/call", response_model=CallToolResponse)
async def call_tool(
    body: CallToolRequest,
    session: AsyncSession = Depends(get_session),
) -> CallToolResponse:
    logger.debug("Tool call: %s", body.name)
    result = await tool_registry.call(session, body.name, body.arguments)
    return CallToolResponse(**result)
