"""Static tool registry for the MCP-style interface.

Tools are registered explicitly once at import (see ``catalog``); there is no
directory scanning. Each tool pairs a pydantic input model with an async
handler that receives a database session and the validated arguments.
"""

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from booking_backend.core.errors import BadRequestError, BookingAppError, NotFoundError

logger = logging.getLogger(__name__)

ToolHandler = Callable[[AsyncSession, Any], Awaitable[Any]]


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    input_model: type[BaseModel]
    handler: ToolHandler

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_model.model_json_schema(),
        }


def _text_result(payload: Any, is_error: bool = False) -> dict[str, Any]:
    return {
        "content": [{"type": "text", "text": json.dumps(payload, ensure_ascii=False, default=str)}],
        "isError": is_error,
    }


class ToolRegistry:
    def __init__(self) -> None:
        self._tools: dict[str, ToolDefinition] = {}

    def register(self, tool: ToolDefinition) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool
        logger.debug("Tool registered: %s", tool.name)

    def get(self, name: str) -> ToolDefinition:
        tool = self._tools.get(name)
        if tool is None:
            raise NotFoundError.for_resource("Tool", name)
        return tool

    def names(self) -> list[str]:
        return list(self._tools)

    def describe_all(self) -> list[dict[str, Any]]:
        return [t.describe() for t in self._tools.values()]

    async def call(self, session: AsyncSession, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """Run a tool and wrap its result in a text-content envelope.

        Unknown tool names raise NotFoundError. Argument and domain errors are
        returned as isError envelopes after rolling back the session.
        """
        tool = self.get(name)
        try:
            params = tool.input_model.model_validate(arguments)
            result = await tool.handler(session, params)
        except ValidationError as e:
            await session.rollback()
            err = BadRequestError(
                "Invalid tool arguments",
                details=e.errors(include_url=False, include_context=False, include_input=False),
            )
            return _text_result(err.to_dict(), is_error=True)
        except BookingAppError as e:
            await session.rollback()
            logger.info("Tool %s failed: %s", name, e.message)
            return _text_result(e.to_dict(), is_error=True)
        return _text_result(result)
