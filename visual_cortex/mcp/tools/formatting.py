"""Plain-text rendering of tool results."""

from __future__ import annotations

from typing import Iterable

from ...core.types import AccessibilityElement, Device

MAX_DISPLAY_TEXT = 50


def truncate_for_display(text: str, limit: int = MAX_DISPLAY_TEXT) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def format_devices(devices: list[Device]) -> str:
    plural = "s" if len(devices) != 1 else ""
    lines = [f"Found {len(devices)} iOS Simulator{plural}:", ""]

    for device in devices:
        unavailable = "" if device.is_available else " (unavailable)"
        state = "BOOTED" if device.is_booted else (device.raw_state or device.state.value)
        lines.append(f"- {device.name} ({device.platform_version}){unavailable}")
        lines.append(f"  State: {state}")
        lines.append(f"  UDID: {device.udid}")
        lines.append("")

    booted = sum(1 for device in devices if device.is_booted)
    if booted == 1:
        lines.append("1 simulator is currently booted.")
    elif booted:
        lines.append(f"{booted} simulators are currently booted.")
    else:
        lines.append("No simulators are currently booted. Boot one with `xcrun simctl boot <UDID>`.")
    return "\n".join(lines)


def _describe_element(element: AccessibilityElement) -> str:
    parts = [f'"{element.label}"' if element.label else "(no label)"]
    if element.identifier:
        parts.append(f'id="{element.identifier}"')
    if element.frame is not None:
        parts.append(f"at ({round(element.frame.x)}, {round(element.frame.y)})")
    if element.enabled is False:
        parts.append("[disabled]")
    return "  - " + " ".join(parts)


def format_elements(elements: Iterable[AccessibilityElement]) -> str:
    grouped: dict[str, list[AccessibilityElement]] = {}
    for element in elements:
        grouped.setdefault(element.type or "Unknown", []).append(element)

    total = sum(len(items) for items in grouped.values())
    if not total:
        return "No accessible elements found on the current screen."

    lines = [f"Found {total} accessible elements:", ""]
    for element_type, items in grouped.items():
        lines.append(f"{element_type} ({len(items)})")
        lines.extend(_describe_element(item) for item in items)
        lines.append("")
    lines.append("Tip: use the 'tap' tool with 'label' or 'id' to interact with these elements.")
    return "\n".join(lines)
