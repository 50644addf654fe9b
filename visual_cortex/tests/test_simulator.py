import json

import pytest

from visual_cortex.core.exceptions import (
    CommandFailed,
    InvalidInput,
    NoActiveDevice,
    ParseFailure,
)
from visual_cortex.core.simulator import GESTURE_PRESETS, SimulatorService
from visual_cortex.core.types import SwipeSpec, TapById, TapByLabel, TapCoordinates

from conftest import NO_DEVICES_OUTPUT, UDID


def test_active_device_probe(make_gateway):
    assert SimulatorService(make_gateway()).is_active_device_available() is True
    assert SimulatorService(make_gateway(NO_DEVICES_OUTPUT)).is_active_device_available() is False


def test_active_device_probe_swallows_execution_failure(make_gateway):
    gateway = make_gateway(CommandFailed("xcrun: error: unable to find utility", status=72))

    assert SimulatorService(gateway).is_active_device_available() is False


def test_resolve_active_device_id_is_validated_and_stable(simulator, gateway):
    first = simulator.resolve_active_device_id()
    second = simulator.resolve_active_device_id()

    assert first is not None
    assert first.value == UDID
    assert first == second
    assert gateway.probes == [("xcrun", ("simctl", "list", "devices", "booted"))] * 2


def test_resolve_active_device_id_returns_none_without_booted_device(make_gateway):
    assert SimulatorService(make_gateway(NO_DEVICES_OUTPUT)).resolve_active_device_id() is None


def test_device_is_re_resolved_on_every_operation(simulator, gateway):
    simulator.tap(TapById("login"))
    gateway.booted_output = gateway.booted_output.replace("5a1b2c3d", "6b2c3d4e")
    simulator.tap(TapById("login"))

    assert gateway.argv[0][-1] == UDID
    assert gateway.argv[1][-1] == "6B2C3D4E-1111-2222-3333-444455556666"


@pytest.mark.parametrize(
    "spec, expected",
    [
        (TapCoordinates(100, 200.5), ["tap", "-x", "100", "-y", "200.5"]),
        (TapById("login.button"), ["tap", "--id", "login.button"]),
        (TapByLabel("Sign In"), ["tap", "--label", "Sign In"]),
    ],
)
def test_tap_builds_argument_vector(simulator, gateway, spec, expected):
    assert simulator.tap(spec) == "Tap performed"
    assert gateway.argv == [["axe", *expected, "--udid", UDID]]


def test_tap_passes_precise_coordinates_unrounded(simulator, gateway):
    simulator.tap(TapCoordinates(100.1234567, 0.0000004))

    assert gateway.argv[0][1:6] == ["tap", "-x", "100.1234567", "-y", "0.0000004"]


def test_tap_returns_tool_output_when_present(make_gateway):
    gateway = make_gateway(responses={"tap": "  Tapped at (1, 2)\n"})

    assert SimulatorService(gateway).tap(TapCoordinates(1, 2)) == "Tapped at (1, 2)"


def test_tap_rejects_invalid_values_before_invoking(simulator, gateway):
    with pytest.raises(InvalidInput):
        simulator.tap(TapCoordinates(-1, 10))
    with pytest.raises(InvalidInput):
        simulator.tap(TapByLabel("Sign In; reboot"))
    with pytest.raises(InvalidInput):
        simulator.tap({"x": 1, "y": 2})  # type: ignore[arg-type]

    assert gateway.invocations == []
    assert gateway.probes == []


def test_tap_without_booted_device(make_gateway):
    gateway = make_gateway(NO_DEVICES_OUTPUT)

    with pytest.raises(NoActiveDevice):
        SimulatorService(gateway).tap(TapById("login"))
    assert gateway.invocations == []


def test_swipe_with_and_without_duration(simulator, gateway):
    simulator.swipe(SwipeSpec(10, 600, 10, 100))
    simulator.swipe(SwipeSpec(10, 600, 10, 100, duration=0.75))

    assert gateway.argv[0] == [
        "axe", "swipe",
        "--start-x", "10", "--start-y", "600", "--end-x", "10", "--end-y", "100",
        "--udid", UDID,
    ]
    assert gateway.argv[1][-4:] == ["--duration", "0.75", "--udid", UDID]


def test_swipe_validates_duration(simulator, gateway):
    with pytest.raises(InvalidInput, match="Duration"):
        simulator.swipe(SwipeSpec(10, 600, 10, 100, duration=90))
    assert gateway.invocations == []


def test_gesture_preset_without_duration(simulator, gateway):
    simulator.gesture("scroll-up", {})

    assert gateway.argv == [["axe", "gesture", "scroll-up", "--udid", UDID]]


def test_gesture_preset_with_duration(simulator, gateway):
    simulator.gesture("swipe-from-left-edge", {"duration": 2})

    assert gateway.argv == [
        ["axe", "gesture", "swipe-from-left-edge", "--duration", "2", "--udid", UDID]
    ]


@pytest.mark.parametrize("preset", ["diagonal", "scroll-up; reboot", "SCROLL-UP", ""])
def test_gesture_outside_closed_set_is_rejected(simulator, gateway, preset):
    with pytest.raises(InvalidInput, match="Unknown gesture"):
        simulator.gesture(preset, {})
    assert gateway.invocations == []
    assert gateway.probes == []


def test_gesture_presets_are_the_eight_known_names():
    assert len(GESTURE_PRESETS) == 8
    assert {"scroll-up", "scroll-down", "swipe-from-bottom-edge"} <= GESTURE_PRESETS


def test_type_text_passes_whole_string_as_one_argument(simulator, gateway):
    text = "Hello, world. How are you today " * 20

    simulator.type_text(text)

    assert gateway.argv == [["axe", "type", text, "--udid", UDID]]


def test_type_text_rejects_metacharacters(simulator, gateway):
    with pytest.raises(InvalidInput):
        simulator.type_text("$(reboot)")
    assert gateway.invocations == []


def test_enumerate_devices_returns_payload(simulator, gateway):
    payload = simulator.enumerate_devices()

    assert "devices" in payload
    assert gateway.argv == [["xcrun", "simctl", "list", "devices", "--json"]]


def test_enumerate_devices_parse_failure(make_gateway):
    gateway = make_gateway(responses={"simctl": "not json"})

    with pytest.raises(ParseFailure):
        SimulatorService(gateway).enumerate_devices()


def test_capture_screenshot_requests_binary_output(make_gateway):
    png = b"\x89PNG\r\n\x1a\n"
    gateway = make_gateway(responses={"simctl": png})

    assert SimulatorService(gateway).capture_screenshot() == png
    invocation = gateway.invocations[0]
    assert invocation.binary is True
    assert invocation.args == ("simctl", "io", "booted", "screenshot", "--type=png", "-")
    assert gateway.probes == []


def test_describe_accessibility_tree_flattens_in_order(simulator, gateway):
    elements = simulator.accessible_elements()

    assert [(e.label, e.identifier) for e in elements] == [
        ("Sign In", "sign-in"),
        ("Welcome", None),
        (None, "email"),
    ]
    assert gateway.argv == [["axe", "describe-ui", "--udid", UDID]]


@pytest.mark.parametrize("output", ["{not json", json.dumps("just a string"), ""])
def test_describe_accessibility_tree_rejects_malformed_output(make_gateway, output):
    gateway = make_gateway(responses={"describe-ui": output})

    with pytest.raises(ParseFailure):
        SimulatorService(gateway).describe_accessibility_tree()


def test_command_failure_propagates_without_retry(make_gateway):
    gateway = make_gateway(responses={"tap": CommandFailed("element not found", status=1)})

    with pytest.raises(CommandFailed, match="element not found"):
        SimulatorService(gateway).tap(TapByLabel("Missing"))
    assert len(gateway.invocations) == 1
