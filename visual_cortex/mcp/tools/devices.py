"""Device discovery tools."""

from __future__ import annotations

from ...core.devices import parse_devices, sort_devices
from .base import SimulatorTool, ToolResponse, text_response
from .formatting import format_devices
from .schemas import ListDevicesArguments


class ListDevicesTool(SimulatorTool):
    name = "list_devices"
    description = (
        "List all available iOS Simulators with their status (Booted/Shutdown), UDID, "
        "and runtime version. Useful for discovering which simulators are available "
        "and which one is currently running."
    )
    input_schema = {
        "type": "object",
        "properties": {
            "available_only": {
                "type": "boolean",
                "description": (
                    "If true, only show available devices (not those with runtime "
                    "errors). Default is false."
                ),
            },
        },
    }
    error_context = "Failed to list devices"
    arguments_model = ListDevicesArguments
    requires_device = False

    async def run(self, query: ListDevicesArguments) -> ToolResponse:
        payload = await self._call(self.simulator.enumerate_devices)
        devices = sort_devices(parse_devices(payload, available_only=query.available_only))
        return text_response(format_devices(devices))
