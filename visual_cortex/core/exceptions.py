"""Custom exception hierarchy for the simulator bridge."""

from __future__ import annotations


class CortexError(Exception):
    """Base exception for visual-cortex issues."""


class ConfigurationError(CortexError):
    """Raised when configuration is invalid or missing."""


class InvalidInput(CortexError, ValueError):
    """Raised when a caller-supplied value fails validation."""

    def __init__(self, message: str, *, argument: str | None = None) -> None:
        super().__init__(message)
        self.argument = argument


class CommandNotAllowed(CortexError):
    """Raised when an executable outside the allow-list is requested."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Command not allowed: {name}")
        self.name = name


class CommandFailed(CortexError):
    """Raised when an external process exits non-zero or cannot be launched."""

    def __init__(self, message: str, *, status: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.stderr = stderr


class ParseFailure(CortexError):
    """Raised when an external tool's structured output has an unexpected shape."""


class NoActiveDevice(CortexError):
    """Raised when an operation needs a booted simulator and none is running."""

    def __init__(self, message: str = "No iOS Simulator is currently running") -> None:
        super().__init__(message)
