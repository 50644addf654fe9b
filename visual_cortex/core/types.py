"""Shared type definitions.

Validated arguments are only produced by :mod:`visual_cortex.core.validation`;
constructing one directly raises ``TypeError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Mapping, Union

# Held by the validation module; direct construction without it is refused.
_VALIDATION_KEY = object()


@dataclass(frozen=True, slots=True)
class ValidatedArgument:
    """A caller value together with the constraint class that admitted it."""

    kind: ClassVar[str] = "argument"

    value: str | float
    constraint: str
    _key: object = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self._key is not _VALIDATION_KEY:
            msg = f"{type(self).__name__} can only be created by its validation function"
            raise TypeError(msg)

    def as_arg(self) -> str:
        """Render the value for insertion into an argument vector."""

        return str(self.value)


@dataclass(frozen=True, slots=True)
class Identifier(ValidatedArgument):
    kind: ClassVar[str] = "identifier"


@dataclass(frozen=True, slots=True)
class Label(ValidatedArgument):
    kind: ClassVar[str] = "label"


@dataclass(frozen=True, slots=True)
class FreeText(ValidatedArgument):
    kind: ClassVar[str] = "free_text"


@dataclass(frozen=True, slots=True)
class DeviceUDID(ValidatedArgument):
    kind: ClassVar[str] = "device_udid"


@dataclass(frozen=True, slots=True)
class _NumericArgument(ValidatedArgument):
    def as_arg(self) -> str:
        return format_number(float(self.value))


@dataclass(frozen=True, slots=True)
class Coordinate(_NumericArgument):
    kind: ClassVar[str] = "coordinate"


@dataclass(frozen=True, slots=True)
class Duration(_NumericArgument):
    kind: ClassVar[str] = "duration"


def format_number(value: float) -> str:
    """Render a finite number as a plain decimal string (no exponent)."""

    text = format(Decimal(repr(float(value))).normalize(), "f")
    return "0" if text == "-0" else text


@dataclass(frozen=True, slots=True)
class CommandInvocation:
    """One external process launch: logical executable plus ordered argv."""

    executable: str
    args: tuple[str, ...] = ()
    binary: bool = False
    encoding: str = "utf-8"
    max_output_bytes: int | None = None
    env: Mapping[str, str] | None = None


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of a successful invocation; never outlives the calling operation."""

    status: int
    stdout: str | bytes
    stderr: str

    @property
    def text(self) -> str:
        if isinstance(self.stdout, bytes):
            return self.stdout.decode("utf-8", errors="replace")
        return self.stdout


class DeviceState(str, Enum):
    BOOTED = "Booted"
    SHUTDOWN = "Shutdown"
    OTHER = "Other"

    @classmethod
    def from_raw(cls, raw: str | None) -> "DeviceState":
        for member in (cls.BOOTED, cls.SHUTDOWN):
            if raw == member.value:
                return member
        return cls.OTHER


@dataclass(frozen=True, slots=True)
class Device:
    """A simulator as reported by ``simctl list devices --json``."""

    name: str
    udid: str
    state: DeviceState
    platform_version: str
    is_available: bool
    raw_state: str = ""
    device_type: str | None = None

    @property
    def is_booted(self) -> bool:
        return self.state is DeviceState.BOOTED


@dataclass(frozen=True, slots=True)
class TapCoordinates:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class TapById:
    identifier: str


@dataclass(frozen=True, slots=True)
class TapByLabel:
    label: str


TapSpec = Union[TapCoordinates, TapById, TapByLabel]


@dataclass(frozen=True, slots=True)
class SwipeSpec:
    start_x: float
    start_y: float
    end_x: float
    end_y: float
    duration: float | None = None


@dataclass(frozen=True, slots=True)
class Rect:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class AccessibilityElement:
    """A labelled or identified node from the accessibility hierarchy."""

    type: str | None
    label: str | None
    identifier: str | None
    value: str | None
    enabled: bool | None
    frame: Rect | None
