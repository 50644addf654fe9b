from __future__ import annotations

import json
from typing import Any, Callable

import pytest

from visual_cortex.core.simulator import SimulatorService
from visual_cortex.core.types import CommandInvocation, CommandResult

UDID = "5A1B2C3D-1111-2222-3333-444455556666"

BOOTED_OUTPUT = f"""== Devices ==
-- iOS 17.0 --
    iPhone 15 ({UDID.lower()}) (Booted)
"""

NO_DEVICES_OUTPUT = """== Devices ==
-- iOS 17.0 --
"""

DEVICES_PAYLOAD: dict[str, Any] = {
    "devices": {
        "com.apple.CoreSimulator.SimRuntime.iOS-17-0": [
            {
                "name": "iPhone 15",
                "udid": UDID,
                "state": "Booted",
                "isAvailable": True,
                "deviceTypeIdentifier": "com.apple.CoreSimulator.SimDeviceType.iPhone-15",
            },
            {
                "name": "iPad Air",
                "udid": "0F0E0D0C-AAAA-BBBB-CCCC-DDDDEEEEFFFF",
                "state": "Shutdown",
                "isAvailable": False,
            },
        ],
        "com.apple.CoreSimulator.SimRuntime.watchOS-10-2": [
            {
                "name": "Apple Watch Series 9",
                "udid": "11111111-2222-3333-4444-555555555555",
                "state": "Shutdown",
                "isAvailable": True,
            }
        ],
    }
}

UI_TREE: list[dict[str, Any]] = [
    {
        "type": "Application",
        "AXLabel": None,
        "children": [
            {
                "type": "Group",
                "children": [
                    {
                        "type": "Button",
                        "AXLabel": "Sign In",
                        "AXUniqueId": "sign-in",
                        "enabled": True,
                        "frame": {"x": 20.4, "y": 100.6, "width": 120, "height": 44},
                    },
                    {"type": "StaticText", "AXLabel": "Welcome", "AXValue": "Welcome"},
                ],
            },
            {
                "type": "TextField",
                "AXUniqueId": "email",
                "enabled": False,
            },
        ],
    }
]


class FakeGateway:
    """Records invocations instead of spawning processes."""

    def __init__(
        self,
        booted_output: str | Exception = BOOTED_OUTPUT,
        responses: dict[str, str | bytes | Exception] | None = None,
    ) -> None:
        self.booted_output = booted_output
        self.responses = responses or {}
        self.invocations: list[CommandInvocation] = []
        self.probes: list[tuple[str, tuple[str, ...]]] = []

    def execute_safe(self, executable: str, args=()) -> str:
        self.probes.append((executable, tuple(args)))
        if isinstance(self.booted_output, Exception):
            raise self.booted_output
        return self.booted_output

    def execute(self, invocation: CommandInvocation) -> CommandResult:
        self.invocations.append(invocation)
        response = self.responses.get(invocation.args[0], "")
        if isinstance(response, Exception):
            raise response
        return CommandResult(status=0, stdout=response, stderr="")

    @property
    def argv(self) -> list[list[str]]:
        return [[invocation.executable, *invocation.args] for invocation in self.invocations]


@pytest.fixture
def make_gateway() -> Callable[..., FakeGateway]:
    return FakeGateway


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway(
        responses={
            "simctl": json.dumps(DEVICES_PAYLOAD),
            "describe-ui": json.dumps(UI_TREE),
        }
    )


@pytest.fixture
def simulator(gateway: FakeGateway) -> SimulatorService:
    return SimulatorService(gateway)  # type: ignore[arg-type]
