from typing import Any

from pydantic import BaseModel, Field


class ToolInfo(BaseModel):
    name: str
    description: str
    inputSchema: dict[str, Any]


class ListToolsResponse(BaseModel):
    tools: list[ToolInfo]


class CallToolRequest(BaseModel):
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class TextContent(BaseModel):
    type: str = "text"
    text: str


class CallToolResponse(BaseModel):
    content: list[TextContent]
    isError: bool = False
