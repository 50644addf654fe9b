"""Simulator operations built on the command gateway.

Every operation that targets the booted simulator resolves and re-validates
its UDID on each call. There is no cached device handle.
"""

from __future__ import annotations

import json
import re
from functools import lru_cache
from typing import Any, Mapping

from .accessibility import flatten_accessibility_tree
from .command_gateway import AXE, XCRUN, CommandGateway
from .exceptions import CommandFailed, CommandNotAllowed, InvalidInput, NoActiveDevice, ParseFailure
from .logging_config import get_logger
from .types import (
    AccessibilityElement,
    CommandInvocation,
    DeviceUDID,
    SwipeSpec,
    TapById,
    TapByLabel,
    TapCoordinates,
    TapSpec,
)
from .validation import (
    validate_coordinate,
    validate_device_id,
    validate_duration,
    validate_free_text,
    validate_identifier,
    validate_label,
)

logger = get_logger(__name__)

GESTURE_PRESETS: frozenset[str] = frozenset(
    {
        "scroll-up",
        "scroll-down",
        "scroll-left",
        "scroll-right",
        "swipe-from-left-edge",
        "swipe-from-right-edge",
        "swipe-from-top-edge",
        "swipe-from-bottom-edge",
    }
)

_BOOTED_PROBE = ("simctl", "list", "devices", "booted")
_BOOTED_LINE = re.compile(
    r"\(([0-9A-F]{8}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{12})\)\s*\(Booted\)",
    re.IGNORECASE,
)


class SimulatorService:
    """Translate validated intents into ``xcrun`` / ``axe`` invocations."""

    def __init__(self, gateway: CommandGateway | None = None) -> None:
        self._gateway = gateway or CommandGateway()

    def is_active_device_available(self) -> bool:
        """Report whether any simulator is booted; probe failures count as no."""

        try:
            output = self._gateway.execute_safe(XCRUN, _BOOTED_PROBE)
        except (CommandFailed, CommandNotAllowed) as exc:
            logger.info("device_probe_failed", error=str(exc))
            return False
        return "Booted" in output

    def resolve_active_device_id(self) -> DeviceUDID | None:
        output = self._gateway.execute_safe(XCRUN, _BOOTED_PROBE)
        match = _BOOTED_LINE.search(output)
        if not match:
            return None
        return validate_device_id(match.group(1))

    def _require_device(self) -> DeviceUDID:
        udid = self.resolve_active_device_id()
        if udid is None:
            raise NoActiveDevice()
        return udid

    def enumerate_devices(self) -> dict[str, Any]:
        """Return the raw ``simctl list devices --json`` payload."""

        result = self._gateway.execute(
            CommandInvocation(executable=XCRUN, args=("simctl", "list", "devices", "--json"))
        )
        payload = _load_json(result.text, "device list")
        if not isinstance(payload, dict):
            raise ParseFailure("device list is not a JSON object")
        return payload

    def capture_screenshot(self) -> bytes:
        """Capture a PNG of whichever simulator is booted.

        Callers check :meth:`is_active_device_available` first.
        """

        result = self._gateway.execute(
            CommandInvocation(
                executable=XCRUN,
                args=("simctl", "io", "booted", "screenshot", "--type=png", "-"),
                binary=True,
            )
        )
        stdout = result.stdout
        return stdout if isinstance(stdout, bytes) else stdout.encode("utf-8")

    def tap(self, spec: TapSpec) -> str:
        if isinstance(spec, TapCoordinates):
            target = [
                "-x",
                validate_coordinate(spec.x, "x").as_arg(),
                "-y",
                validate_coordinate(spec.y, "y").as_arg(),
            ]
        elif isinstance(spec, TapById):
            target = ["--id", validate_identifier(spec.identifier).as_arg()]
        elif isinstance(spec, TapByLabel):
            target = ["--label", validate_label(spec.label).as_arg()]
        else:
            raise InvalidInput(
                "Tap target must be exactly one of coordinates, id, or label",
                argument="target",
            )

        udid = self._require_device()
        return self._run_axe("tap", *target, udid=udid, fallback="Tap performed")

    def swipe(self, spec: SwipeSpec) -> str:
        args = [
            "--start-x",
            validate_coordinate(spec.start_x, "startX").as_arg(),
            "--start-y",
            validate_coordinate(spec.start_y, "startY").as_arg(),
            "--end-x",
            validate_coordinate(spec.end_x, "endX").as_arg(),
            "--end-y",
            validate_coordinate(spec.end_y, "endY").as_arg(),
        ]
        if spec.duration is not None:
            args += ["--duration", validate_duration(spec.duration).as_arg()]

        udid = self._require_device()
        return self._run_axe("swipe", *args, udid=udid, fallback="Swipe performed")

    def gesture(self, preset: str, options: Mapping[str, Any] | None = None) -> str:
        if preset not in GESTURE_PRESETS:
            allowed = ", ".join(sorted(GESTURE_PRESETS))
            raise InvalidInput(
                f"Unknown gesture {preset!r}. Allowed: {allowed}", argument="direction"
            )

        args = [preset]
        duration = (options or {}).get("duration")
        if duration is not None:
            args += ["--duration", validate_duration(duration).as_arg()]

        udid = self._require_device()
        return self._run_axe("gesture", *args, udid=udid, fallback="Gesture performed")

    def type_text(self, text: str) -> str:
        validated = validate_free_text(text)
        udid = self._require_device()
        logger.debug("type_text", length=len(validated.as_arg()))
        return self._run_axe("type", validated.as_arg(), udid=udid, fallback="Text typed")

    def describe_accessibility_tree(self) -> Any:
        """Return the parsed accessibility hierarchy of the booted simulator."""

        udid = self._require_device()
        result = self._gateway.execute(
            CommandInvocation(executable=AXE, args=("describe-ui", "--udid", udid.as_arg()))
        )
        tree = _load_json(result.text, "accessibility hierarchy")
        if not isinstance(tree, (list, dict)):
            raise ParseFailure("accessibility hierarchy is neither an object nor a list")
        return tree

    def accessible_elements(self) -> list[AccessibilityElement]:
        return flatten_accessibility_tree(self.describe_accessibility_tree())

    def _run_axe(self, command: str, *args: str, udid: DeviceUDID, fallback: str) -> str:
        result = self._gateway.execute(
            CommandInvocation(executable=AXE, args=(command, *args, "--udid", udid.as_arg()))
        )
        return result.text.strip() or fallback


def _load_json(text: str, what: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseFailure(f"Could not parse {what}: {exc}") from exc


@lru_cache
def get_simulator_service() -> SimulatorService:
    """Return the process-wide SimulatorService."""

    return SimulatorService()
