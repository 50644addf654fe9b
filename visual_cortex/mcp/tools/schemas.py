"""Argument models for the simulator tools.

Each model turns the loose argument bag into one of the typed specs in
:mod:`visual_cortex.core.types`, enforcing the "exactly one form" rule.
Numbers are strict: booleans and numeric strings are refused.
"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)

from ...core.simulator import GESTURE_PRESETS
from ...core.types import SwipeSpec, TapById, TapByLabel, TapCoordinates, TapSpec

Number = Union[StrictInt, StrictFloat]


class TapArguments(BaseModel):
    """Tap by point, accessibility identifier, or accessibility label."""

    model_config = ConfigDict(populate_by_name=True)

    x: Number | None = Field(None, description="X coordinate in points")
    y: Number | None = Field(None, description="Y coordinate in points")
    identifier: StrictStr | None = Field(None, alias="id", description="Accessibility identifier")
    label: StrictStr | None = Field(None, description="Accessibility label")

    @model_validator(mode="after")
    def ensure_single_target(self) -> "TapArguments":
        if (self.x is None) != (self.y is None):
            msg = "x and y must be provided together"
            raise ValueError(msg)
        provided = [
            self.x is not None,
            self.identifier is not None,
            self.label is not None,
        ]
        if not any(provided):
            msg = "Provide either coordinates (x, y), accessibility id, or label"
            raise ValueError(msg)
        if sum(provided) > 1:
            msg = "Provide only one of coordinates (x, y), accessibility id, or label"
            raise ValueError(msg)
        return self

    def to_spec(self) -> TapSpec:
        if self.identifier is not None:
            return TapById(identifier=self.identifier)
        if self.label is not None:
            return TapByLabel(label=self.label)
        return TapCoordinates(x=self.x, y=self.y)


class SwipeArguments(BaseModel):
    """Preset gesture by name, or a custom swipe between two points."""

    model_config = ConfigDict(populate_by_name=True)

    direction: StrictStr | None = Field(None, description="Preset gesture name")
    start_x: Number | None = Field(None, alias="startX")
    start_y: Number | None = Field(None, alias="startY")
    end_x: Number | None = Field(None, alias="endX")
    end_y: Number | None = Field(None, alias="endY")
    duration: Number | None = Field(None, description="Duration in seconds")

    def coordinates(self) -> tuple[float | None, ...]:
        return (self.start_x, self.start_y, self.end_x, self.end_y)

    @field_validator("direction")
    @classmethod
    def ensure_known_gesture(cls, value: str | None) -> str | None:
        if value is not None and value not in GESTURE_PRESETS:
            allowed = ", ".join(sorted(GESTURE_PRESETS))
            msg = f"Unknown gesture {value!r}. Allowed: {allowed}"
            raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def ensure_single_form(self) -> "SwipeArguments":
        given = [value is not None for value in self.coordinates()]
        if self.direction is not None:
            if any(given):
                msg = "Provide either 'direction' or coordinates, not both"
                raise ValueError(msg)
            return self
        if not all(given):
            msg = (
                "Provide either 'direction' for preset gestures, or all coordinates "
                "(startX, startY, endX, endY) for custom swipe"
            )
            raise ValueError(msg)
        return self

    def gesture_options(self) -> dict[str, float]:
        return {"duration": self.duration} if self.duration is not None else {}

    def to_spec(self) -> SwipeSpec:
        return SwipeSpec(
            start_x=self.start_x,
            start_y=self.start_y,
            end_x=self.end_x,
            end_y=self.end_y,
            duration=self.duration,
        )


class TypeTextArguments(BaseModel):
    text: StrictStr = Field(..., description="Text to type")


class ListDevicesArguments(BaseModel):
    available_only: bool = Field(False, description="Hide devices with runtime errors")


class DescribeUIArguments(BaseModel):
    format: Literal["summary", "full"] = Field("summary", description="Output format")


class NoArguments(BaseModel):
    """Tools that take no input ignore whatever they are sent."""
