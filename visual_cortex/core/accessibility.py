"""Flattening of the AXe accessibility hierarchy."""

from __future__ import annotations

from typing import Any, Mapping

from .types import AccessibilityElement, Rect


def _as_rect(frame: Any) -> Rect | None:
    if not isinstance(frame, Mapping):
        return None
    try:
        return Rect(
            x=float(frame.get("x", 0)),
            y=float(frame.get("y", 0)),
            width=float(frame.get("width", 0)),
            height=float(frame.get("height", 0)),
        )
    except (TypeError, ValueError):
        return None


def _as_element(node: Mapping[str, Any]) -> AccessibilityElement:
    return AccessibilityElement(
        type=node.get("type") or node.get("role"),
        label=node.get("AXLabel"),
        identifier=node.get("AXUniqueId"),
        value=node.get("AXValue"),
        enabled=node.get("enabled"),
        frame=_as_rect(node.get("frame")),
    )


def flatten_accessibility_tree(tree: Any) -> list[AccessibilityElement]:
    """Collect labelled or identified nodes in depth-first pre-order.

    Uses an explicit stack, so arbitrarily deep hierarchies are safe. Nodes that
    are not objects are skipped; their children are not visited.
    """

    roots = tree if isinstance(tree, list) else [tree]
    stack: list[Any] = list(reversed(roots))
    elements: list[AccessibilityElement] = []

    while stack:
        node = stack.pop()
        if not isinstance(node, Mapping):
            continue

        element = _as_element(node)
        if element.label or element.identifier:
            elements.append(element)

        children = node.get("children")
        if isinstance(children, list):
            stack.extend(reversed(children))

    return elements
