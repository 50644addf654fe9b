"""Tools that observe the simulator screen."""

from __future__ import annotations

import json

from ...core.accessibility import flatten_accessibility_tree
from .base import SimulatorTool, ToolResponse, image_response, text_response
from .formatting import format_elements
from .schemas import DescribeUIArguments, NoArguments


class ScreenshotTool(SimulatorTool):
    name = "get_screenshot"
    description = (
        "Take a screenshot of the currently running iOS Simulator to see the UI. "
        "Use this when the user asks you to check visual alignment, colors, or layout bugs."
    )
    input_schema = {"type": "object", "properties": {}}
    error_context = "Failed to take screenshot"

    async def run(self, request: NoArguments) -> ToolResponse:
        image = await self._call(self.simulator.capture_screenshot)
        return image_response(
            image,
            mime_type="image/png",
            text="Here is the current screen of the iOS Simulator.",
        )


class DescribeUITool(SimulatorTool):
    name = "describe_ui"
    description = (
        "Get the accessibility hierarchy of the current iOS Simulator screen. Returns "
        "visible UI elements with their accessibility labels, identifiers, types, and "
        "positions. Useful for discovering element identifiers for tapping or "
        "understanding the current screen state."
    )
    input_schema = {
        "type": "object",
        "properties": {
            "format": {
                "type": "string",
                "enum": ["summary", "full"],
                "description": (
                    "Output format: 'summary' for a readable list of interactive "
                    "elements, 'full' for the complete JSON hierarchy. Default is 'summary'."
                ),
            },
        },
    }
    arguments_model = DescribeUIArguments
    error_context = "Failed to describe UI"

    async def run(self, query: DescribeUIArguments) -> ToolResponse:
        tree = await self._call(self.simulator.describe_accessibility_tree)

        if query.format == "full":
            return text_response(json.dumps(tree, indent=2, ensure_ascii=False))
        return text_response(format_elements(flatten_accessibility_tree(tree)))
