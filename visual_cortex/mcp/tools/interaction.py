"""Tools that act on the simulator: tap, swipe, and typing."""

from __future__ import annotations

from ...core.simulator import GESTURE_PRESETS
from ...core.types import TapById, TapCoordinates, format_number
from .base import SimulatorTool, ToolResponse, text_response
from .formatting import truncate_for_display
from .schemas import SwipeArguments, TapArguments, TypeTextArguments


class TapTool(SimulatorTool):
    name = "tap"
    description = (
        "Tap on a specific point on the iOS Simulator screen, or tap an element by its "
        "accessibility identifier or label. Use this to interact with buttons, links, "
        "and other UI elements."
    )
    input_schema = {
        "type": "object",
        "properties": {
            "x": {"type": "number", "description": "X coordinate to tap (in points). Use with y."},
            "y": {"type": "number", "description": "Y coordinate to tap (in points). Use with x."},
            "id": {
                "type": "string",
                "description": (
                    "Accessibility identifier (testID) of the element to tap. "
                    "Alternative to coordinates."
                ),
            },
            "label": {
                "type": "string",
                "description": (
                    "Accessibility label of the element to tap. Alternative to coordinates or id."
                ),
            },
        },
    }
    arguments_model = TapArguments
    error_context = "Failed to tap"

    async def run(self, request: TapArguments) -> ToolResponse:
        spec = request.to_spec()
        await self._call(self.simulator.tap, spec)

        if isinstance(spec, TapCoordinates):
            point = f"({format_number(spec.x)}, {format_number(spec.y)})"
            description = f"Tapped at coordinates {point}"
        elif isinstance(spec, TapById):
            description = f'Tapped element with id "{spec.identifier}"'
        else:
            description = f'Tapped element with label "{spec.label}"'
        return text_response(description)


class SwipeTool(SimulatorTool):
    name = "swipe"
    description = (
        "Perform a swipe or scroll gesture on the iOS Simulator. Use preset gestures like "
        "'scroll-up' or 'scroll-down', or provide custom coordinates for precise control."
    )
    input_schema = {
        "type": "object",
        "properties": {
            "direction": {
                "type": "string",
                "enum": sorted(GESTURE_PRESETS),
                "description": "Preset gesture. Use this for common gestures like scrolling.",
            },
            "startX": {"type": "number", "description": "Starting X coordinate for a custom swipe."},
            "startY": {"type": "number", "description": "Starting Y coordinate for a custom swipe."},
            "endX": {"type": "number", "description": "Ending X coordinate for a custom swipe."},
            "endY": {"type": "number", "description": "Ending Y coordinate for a custom swipe."},
            "duration": {
                "type": "number",
                "description": "Duration of the swipe in seconds (0-60). Default is ~0.5s.",
            },
        },
    }
    arguments_model = SwipeArguments
    error_context = "Failed to swipe"

    async def run(self, request: SwipeArguments) -> ToolResponse:
        if request.direction is not None:
            await self._call(self.simulator.gesture, request.direction, request.gesture_options())
            return text_response(f"Performed {request.direction} gesture")

        spec = request.to_spec()
        await self._call(self.simulator.swipe, spec)
        start = f"({format_number(spec.start_x)}, {format_number(spec.start_y)})"
        end = f"({format_number(spec.end_x)}, {format_number(spec.end_y)})"
        return text_response(f"Swiped from {start} to {end}")


class TypeTextTool(SimulatorTool):
    name = "type_text"
    description = (
        "Type text into the currently focused text field on the iOS Simulator. Supports "
        "US keyboard characters. Make sure a text field is focused before typing."
    )
    input_schema = {
        "type": "object",
        "properties": {
            "text": {"type": "string", "description": "The text to type into the simulator."},
        },
        "required": ["text"],
    }
    arguments_model = TypeTextArguments
    error_context = "Failed to type text"

    async def run(self, request: TypeTextArguments) -> ToolResponse:
        text = request.text
        await self._call(self.simulator.type_text, text)
        return text_response(f'Typed: "{truncate_for_display(text)}"')
