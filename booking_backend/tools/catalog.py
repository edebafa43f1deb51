from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from booking_backend.tools.booking_tools import register_booking_tools
from booking_backend.tools.registry import ToolDefinition, ToolRegistry


class HealthCheckParams(BaseModel):
    pass


async def health_check_tool(session: AsyncSession, params: HealthCheckParams) -> dict:
    await session.execute(text("SELECT 1"))
    return {"status": "ok", "database": "ok"}


def build_registry() -> ToolRegistry:
    registry = ToolRegistry()
    register_booking_tools(registry)
    registry.register(
        ToolDefinition(
            name="healthCheck",
            description="Check that the service and its database are reachable",
            input_model=HealthCheckParams,
            handler=health_check_tool,
        )
    )
    return registry


tool_registry = build_registry()
