"""FastMCP server wiring for the tool registry."""

from __future__ import annotations

import base64
from typing import Any

from fastmcp import FastMCP
from fastmcp.tools import Tool, ToolResult
from fastmcp.utilities.types import Image

from ..core.config import get_settings
from ..core.logging_config import get_logger
from .registry import ToolRegistry, build_registry
from .tools import SimulatorTool, ToolResponse
from .tools.base import ImagePart

logger = get_logger(__name__)

SERVER_INSTRUCTIONS = (
    "Observe and drive the booted iOS Simulator: take screenshots, list devices, "
    "read the accessibility tree, tap, swipe, and type text."
)


class RegistryTool(Tool):
    """FastMCP component that forwards calls to a registered simulator tool."""

    def __init__(self, tool: SimulatorTool) -> None:
        descriptor = tool.descriptor
        super().__init__(
            name=descriptor.name,
            description=descriptor.description,
            parameters=dict(descriptor.input_schema),
        )
        self._tool = tool

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        logger.debug("mcp_tool_call", name=self.name, arguments=sorted(arguments))
        response = await self._tool.execute(arguments)
        return to_tool_result(response)


def to_tool_result(response: ToolResponse) -> ToolResult:
    """Convert a ToolResponse into FastMCP's result, keeping the error flag."""

    blocks: list[Any] = []
    for part in response.content:
        if isinstance(part, ImagePart):
            image_format = part.mime_type.split("/", 1)[-1]
            blocks.append(Image(data=base64.b64decode(part.data), format=image_format))
        else:
            blocks.append(part.text)

    if not any(isinstance(block, Image) for block in blocks):
        # A bare string becomes exactly one text block.
        return ToolResult(content="\n".join(blocks), is_error=response.is_error)
    return ToolResult(content=blocks, is_error=response.is_error)


def build_server(registry: ToolRegistry | None = None) -> FastMCP:
    """Create the FastMCP server exposing every registered tool."""

    if registry is None:
        registry = build_registry()
    settings = get_settings()
    server = FastMCP(name=settings.server_name, instructions=SERVER_INSTRUCTIONS)
    for tool in registry:
        server.add_tool(RegistryTool(tool))
    logger.info("mcp_tools_registered", count=len(registry), names=registry.names())
    return server
