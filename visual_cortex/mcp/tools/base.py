"""Tool contract and the normalised response shape.

Every tool exposes a :class:`ToolDescriptor` and an async ``execute`` that
always returns a :class:`ToolResponse`; exceptions never leave ``execute``.
"""

from __future__ import annotations

import asyncio
import base64
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from ...core.exceptions import CortexError, InvalidInput, NoActiveDevice
from ...core.logging_config import get_logger
from ...core.simulator import SimulatorService, get_simulator_service
from .schemas import NoArguments

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ToolDescriptor:
    """Name, description and JSON input schema advertised to clients."""

    name: str
    description: str
    input_schema: Mapping[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": dict(self.input_schema),
        }


@dataclass(frozen=True, slots=True)
class TextPart:
    text: str
    type: Literal["text"] = "text"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True, slots=True)
class ImagePart:
    data: str
    mime_type: str = "image/png"
    type: Literal["image"] = "image"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "data": self.data, "mimeType": self.mime_type}


@dataclass(frozen=True, slots=True)
class ToolResponse:
    content: list[TextPart | ImagePart] = field(default_factory=list)
    is_error: bool = False

    @property
    def text(self) -> str:
        """Concatenated text parts, mainly for logs and tests."""

        return "\n".join(part.text for part in self.content if isinstance(part, TextPart))

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"content": [part.to_dict() for part in self.content]}
        if self.is_error:
            payload["isError"] = True
        return payload


def text_response(text: str) -> ToolResponse:
    return ToolResponse(content=[TextPart(text)])


def image_response(image: bytes, mime_type: str = "image/png", text: str = "") -> ToolResponse:
    parts: list[TextPart | ImagePart] = [
        ImagePart(data=base64.b64encode(image).decode("ascii"), mime_type=mime_type)
    ]
    if text:
        parts.append(TextPart(text))
    return ToolResponse(content=parts)


def error_response(context: str, error: BaseException | str) -> ToolResponse:
    return ToolResponse(content=[TextPart(f"{context}: {error}")], is_error=True)


def describe_validation_error(exc: ValidationError) -> str:
    """Collapse pydantic errors into one readable line."""

    messages = []
    for error in exc.errors():
        message = str(error.get("msg", "invalid value"))
        message = message.removeprefix("Value error, ")
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "__root__")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages)


class SimulatorTool(ABC):
    """Base class for tools that drive the simulator.

    Subclasses set ``name``, ``description``, ``input_schema``,
    ``arguments_model`` and ``error_context`` and implement :meth:`run`.
    Arguments are parsed before anything touches the simulator, so a malformed
    request never spawns a process. ``requires_device`` then makes the base
    class check for a booted simulator before ``run`` is called.
    """

    name: str
    description: str
    input_schema: Mapping[str, Any] = {"type": "object", "properties": {}}
    arguments_model: type[BaseModel] = NoArguments
    error_context: str = "Tool failed"
    requires_device: bool = True

    def __init__(self, simulator: SimulatorService | None = None) -> None:
        self._simulator = simulator or get_simulator_service()

    @property
    def simulator(self) -> SimulatorService:
        return self._simulator

    @property
    def descriptor(self) -> ToolDescriptor:
        return ToolDescriptor(
            name=self.name,
            description=self.description,
            input_schema=self.input_schema,
        )

    async def execute(self, arguments: Mapping[str, Any] | None = None) -> ToolResponse:
        try:
            request = self.parse(arguments)
            if self.requires_device and not await self._call(
                self._simulator.is_active_device_available
            ):
                raise NoActiveDevice()
            return await self.run(request)
        except NoActiveDevice as exc:
            logger.info("tool_no_active_device", tool=self.name)
            return error_response("Please launch a simulator first", exc)
        except ValidationError as exc:
            logger.info("tool_invalid_arguments", tool=self.name, errors=exc.error_count())
            return error_response(self.error_context, InvalidInput(describe_validation_error(exc)))
        except CortexError as exc:
            logger.warning("tool_failed", tool=self.name, kind=type(exc).__name__, error=str(exc))
            return error_response(self.error_context, exc)
        except Exception as exc:  # noqa: BLE001 - nothing raw crosses the dispatch boundary
            logger.exception("tool_crashed", tool=self.name)
            return error_response(self.error_context, exc)

    def parse(self, arguments: Mapping[str, Any] | None) -> BaseModel:
        return self.arguments_model.model_validate(dict(arguments or {}))

    @abstractmethod
    async def run(self, request: Any) -> ToolResponse:
        """Perform the operation; may raise, ``execute`` normalises failures."""

    @staticmethod
    async def _call(func: Callable[..., T], *args: Any) -> T:
        """Run a blocking simulator operation off the event loop."""

        return await asyncio.to_thread(func, *args)
