"""Tool registry: name to tool lookup and capability advertisement."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping

from ..core.logging_config import get_logger
from .tools import SimulatorTool, ToolDescriptor, ToolResponse, build_tools
from .tools.base import error_response

logger = get_logger(__name__)


class ToolRegistry:
    """Registry of simulator tools keyed by unique name."""

    def __init__(self, tools: Iterable[SimulatorTool] = ()) -> None:
        self._tools: dict[str, SimulatorTool] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: SimulatorTool) -> None:
        """Register a tool; a later registration under the same name replaces it."""

        if tool.name in self._tools:
            logger.warning("tool_replaced", name=tool.name)
        self._tools[tool.name] = tool
        logger.debug("tool_registered", name=tool.name)

    def get(self, name: str) -> SimulatorTool | None:
        """Return the tool registered as ``name``, or ``None``."""

        return self._tools.get(name)

    def list_descriptors(self) -> list[ToolDescriptor]:
        return [tool.descriptor for tool in self._tools.values()]

    def names(self) -> list[str]:
        return list(self._tools)

    async def dispatch(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResponse:
        """Look up ``name`` and execute it; unknown names yield an error response."""

        tool = self.get(name)
        if tool is None:
            return error_response("Unknown tool", name)
        return await tool.execute(arguments)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[SimulatorTool]:
        return iter(self._tools.values())


def build_registry(tools: Iterable[SimulatorTool] | None = None) -> ToolRegistry:
    """Registry preloaded with the default tool set."""

    return ToolRegistry(build_tools() if tools is None else tools)
