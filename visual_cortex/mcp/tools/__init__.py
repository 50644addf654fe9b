"""Simulator tools grouped by domain."""

from __future__ import annotations

from ...core.simulator import SimulatorService
from .base import SimulatorTool, ToolDescriptor, ToolResponse
from .devices import ListDevicesTool
from .interaction import SwipeTool, TapTool, TypeTextTool
from .screen import DescribeUITool, ScreenshotTool

TOOL_CLASSES: tuple[type[SimulatorTool], ...] = (
    ScreenshotTool,
    ListDevicesTool,
    TapTool,
    SwipeTool,
    TypeTextTool,
    DescribeUITool,
)


def build_tools(simulator: SimulatorService | None = None) -> list[SimulatorTool]:
    """Instantiate every tool against one shared SimulatorService."""

    return [tool_cls(simulator) for tool_cls in TOOL_CLASSES]


__all__ = [
    "DescribeUITool",
    "ListDevicesTool",
    "ScreenshotTool",
    "SimulatorTool",
    "SwipeTool",
    "TOOL_CLASSES",
    "TapTool",
    "ToolDescriptor",
    "ToolResponse",
    "TypeTextTool",
    "build_tools",
]
