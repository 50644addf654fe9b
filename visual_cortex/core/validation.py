"""Validation of every caller-supplied scalar before it reaches a process.

Validators are pure and fail closed: a value is either admitted unchanged
(apart from numeric coercion and UDID upper-casing) or rejected with
:class:`InvalidInput`. Nothing is clamped or truncated here.
"""

from __future__ import annotations

import math
import re
from typing import Any

from .exceptions import InvalidInput
from .types import (
    _VALIDATION_KEY,
    Coordinate,
    DeviceUDID,
    Duration,
    FreeText,
    Identifier,
    Label,
)

SAFE_ID_PATTERN = re.compile(r"[A-Za-z0-9_.:\-]+")
SHELL_METACHARACTERS = re.compile(r"[;&|`$\\<>{}\[\]()#*?~!]")
UDID_PATTERN = re.compile(
    r"[0-9A-F]{8}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{12}",
    re.IGNORECASE,
)

MAX_IDENTIFIER_LENGTH = 256
MAX_LABEL_LENGTH = 512
MAX_TEXT_LENGTH = 10_000

# Device screen space, in points, for both axes.
SCREEN_COORDINATE_MIN = 0.0
SCREEN_COORDINATE_MAX = 5000.0

MIN_DURATION_SECONDS = 0.0
MAX_DURATION_SECONDS = 60.0


def _require_string(raw: Any, name: str, max_length: int) -> str:
    if not isinstance(raw, str):
        raise InvalidInput(f"{name} must be a string", argument=name)
    if not raw:
        raise InvalidInput(f"{name} cannot be empty", argument=name)
    if len(raw) > max_length:
        raise InvalidInput(
            f"{name} is too long (max {max_length} characters)", argument=name
        )
    return raw


def _coerce_number(raw: Any, name: str) -> float:
    if isinstance(raw, bool):
        raise InvalidInput(f"{name} must be a valid number", argument=name)
    try:
        number = float(raw)
    except (TypeError, ValueError):
        raise InvalidInput(f"{name} must be a valid number", argument=name) from None
    if not math.isfinite(number):
        raise InvalidInput(f"{name} must be a valid number", argument=name)
    return number


def validate_identifier(raw: Any, name: str = "Accessibility ID") -> Identifier:
    """Admit an accessibility identifier made of ``[A-Za-z0-9_.:-]``."""

    value = _require_string(raw, name, MAX_IDENTIFIER_LENGTH)
    if not SAFE_ID_PATTERN.fullmatch(value):
        raise InvalidInput(
            f"{name} contains invalid characters. Only alphanumeric, hyphens, "
            "underscores, dots, and colons are allowed.",
            argument=name,
        )
    return Identifier(value, "pattern", _VALIDATION_KEY)


def validate_label(raw: Any, name: str = "Accessibility label") -> Label:
    """Admit an accessibility label free of shell metacharacters."""

    value = _require_string(raw, name, MAX_LABEL_LENGTH)
    if SHELL_METACHARACTERS.search(value):
        raise InvalidInput(f"{name} contains potentially unsafe characters", argument=name)
    return Label(value, "denylist", _VALIDATION_KEY)


def validate_free_text(raw: Any, name: str = "Text") -> FreeText:
    """Admit text for typing; the whole string is kept as one value."""

    value = _require_string(raw, name, MAX_TEXT_LENGTH)
    if SHELL_METACHARACTERS.search(value):
        raise InvalidInput(
            f"{name} contains potentially unsafe shell characters. "
            "Use only printable characters.",
            argument=name,
        )
    return FreeText(value, "denylist", _VALIDATION_KEY)


def validate_coordinate(
    raw: Any,
    name: str,
    minimum: float = SCREEN_COORDINATE_MIN,
    maximum: float = SCREEN_COORDINATE_MAX,
) -> Coordinate:
    """Coerce ``raw`` to a finite number inside ``[minimum, maximum]``."""

    number = _coerce_number(raw, name)
    if number < minimum or number > maximum:
        raise InvalidInput(
            f"{name} must be between {minimum:g} and {maximum:g}", argument=name
        )
    return Coordinate(number, "range", _VALIDATION_KEY)


def validate_duration(raw: Any, name: str = "Duration") -> Duration:
    number = _coerce_number(raw, name)
    if number < MIN_DURATION_SECONDS or number > MAX_DURATION_SECONDS:
        raise InvalidInput(
            f"{name} must be between {MIN_DURATION_SECONDS:g} and "
            f"{MAX_DURATION_SECONDS:g} seconds",
            argument=name,
        )
    return Duration(number, "range", _VALIDATION_KEY)


def validate_device_id(raw: Any, name: str = "UDID") -> DeviceUDID:
    """Admit an 8-4-4-4-12 hex UDID, normalised to upper case."""

    if not isinstance(raw, str):
        raise InvalidInput(f"{name} must be a string", argument=name)
    if not UDID_PATTERN.fullmatch(raw):
        raise InvalidInput(f"Invalid {name} format", argument=name)
    return DeviceUDID(raw.upper(), "pattern", _VALIDATION_KEY)
