"""Tool catalog models."""

from typing import Any

import mcp.types as types
from pydantic import BaseModel, ConfigDict, Field


class ToolAnnotations(BaseModel):
    """Behavioural hints advertised to MCP clients."""

    model_config = ConfigDict(frozen=True)

    title: str
    readOnlyHint: bool = True
    destructiveHint: bool = False
    idempotentHint: bool = True
    openWorldHint: bool = True


class ToolDescriptor(BaseModel):
    """One entry of the immutable tool catalog."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(alias="inputSchema")
    annotations: ToolAnnotations

    @property
    def required(self) -> list[str]:
        return list(self.input_schema.get("required", []))

    def to_mcp(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema,
            annotations=types.ToolAnnotations(**self.annotations.model_dump()),
        )
