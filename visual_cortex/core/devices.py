"""Projection of ``simctl list devices --json`` payloads into :class:`Device`."""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

from .exceptions import ParseFailure
from .types import Device, DeviceState

_RUNTIME_VERSION = re.compile(r"([A-Za-z]*OS)-(\d+)-(\d+)(?:-(\d+))?$")


def extract_platform_version(runtime: str) -> str:
    """Turn ``com.apple.CoreSimulator.SimRuntime.iOS-17-0`` into ``iOS 17.0``.

    Unrecognised runtime identifiers are returned unchanged.
    """

    match = _RUNTIME_VERSION.search(runtime)
    if not match:
        return runtime
    platform, major, minor, patch = match.groups()
    version = f"{major}.{minor}" if patch is None else f"{major}.{minor}.{patch}"
    return f"{platform} {version}"


def parse_devices(payload: Mapping[str, Any], available_only: bool = False) -> list[Device]:
    if not isinstance(payload, Mapping):
        raise ParseFailure("device list is not a JSON object")
    runtimes = payload.get("devices", {})
    if not isinstance(runtimes, Mapping):
        raise ParseFailure("'devices' is not a mapping of runtime to device list")

    devices: list[Device] = []
    for runtime, records in runtimes.items():
        if not isinstance(records, list):
            raise ParseFailure(f"device records for {runtime!r} are not a list")
        version = extract_platform_version(str(runtime))
        for record in records:
            if not isinstance(record, Mapping):
                raise ParseFailure(f"malformed device record under {runtime!r}")
            is_available = bool(record.get("isAvailable", False))
            if available_only and not is_available:
                continue
            raw_state = str(record.get("state", ""))
            devices.append(
                Device(
                    name=str(record.get("name", "")),
                    udid=str(record.get("udid", "")),
                    state=DeviceState.from_raw(raw_state),
                    platform_version=version,
                    is_available=is_available,
                    raw_state=raw_state,
                    device_type=record.get("deviceTypeIdentifier"),
                )
            )
    return devices


def sort_devices(devices: Iterable[Device]) -> list[Device]:
    """Booted devices first, then alphabetical by name."""

    return sorted(devices, key=lambda device: (not device.is_booted, device.name.casefold()))
