"""The single place where external processes are started.

Executables are addressed by logical name and mapped to absolute paths once,
at construction. Arguments always travel as an argument vector with
``shell=False``; the runtime search path is never consulted. Output is read
in chunks against a byte ceiling and the process is killed as soon as either
stream goes over it, so memory stays bounded even for a runaway tool.
"""

from __future__ import annotations

import subprocess
import threading
from types import MappingProxyType
from typing import IO, Mapping, Sequence

from .config import CortexSettings, get_settings
from .exceptions import CommandFailed, CommandNotAllowed, ConfigurationError
from .logging_config import get_logger
from .types import CommandInvocation, CommandResult

logger = get_logger(__name__)

XCRUN = "xcrun"
AXE = "axe"

READ_CHUNK_BYTES = 64 * 1024


def build_allow_list(settings: CortexSettings) -> Mapping[str, str]:
    """Resolve the fixed logical executable names to their configured paths."""

    return MappingProxyType({XCRUN: settings.xcrun_path, AXE: settings.axe_path})


def _read_bounded(stream: IO[bytes] | None, limit: int, sink: list[bytes]) -> bool:
    """Append chunks from ``stream`` to ``sink`` until EOF.

    Returns ``False`` as soon as more than ``limit`` bytes have arrived; the
    offending chunk is not kept.
    """

    if stream is None:
        return True
    total = 0
    while True:
        chunk = stream.read(READ_CHUNK_BYTES)
        if not chunk:
            return True
        total += len(chunk)
        if total > limit:
            return False
        sink.append(chunk)


class _Capture:
    """Output of one process run, filled by :meth:`CommandGateway._capture`."""

    def __init__(self) -> None:
        self.stdout: list[bytes] = []
        self.stderr: list[bytes] = []
        self.overflow = False
        self.timed_out = threading.Event()


class CommandGateway:
    """Allow-listed, shell-free process launcher."""

    def __init__(
        self,
        allow_list: Mapping[str, str] | None = None,
        *,
        max_output_bytes: int | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        settings = get_settings()
        resolved = dict(allow_list) if allow_list is not None else dict(build_allow_list(settings))
        for name, path in resolved.items():
            if not path.startswith("/"):
                raise ConfigurationError(f"executable path for {name!r} must be absolute: {path!r}")
        self._allow_list: Mapping[str, str] = MappingProxyType(resolved)
        self._max_output_bytes = max_output_bytes or settings.max_output_bytes
        self._timeout = (
            timeout_seconds if timeout_seconds is not None else settings.command_timeout_seconds
        )

    @property
    def allow_list(self) -> Mapping[str, str]:
        return self._allow_list

    @property
    def max_output_bytes(self) -> int:
        return self._max_output_bytes

    def execute(self, invocation: CommandInvocation) -> CommandResult:
        """Run ``invocation`` to completion and return its captured output.

        Raises:
            CommandNotAllowed: the logical name is not allow-listed; nothing is spawned.
            CommandFailed: launch failure, timeout, non-zero exit, or output
                exceeding the capture ceiling.
        """

        path = self._allow_list.get(invocation.executable)
        if path is None:
            logger.warning("command_rejected", executable=invocation.executable)
            raise CommandNotAllowed(invocation.executable)

        argv = [path, *invocation.args]
        limit = invocation.max_output_bytes or self._max_output_bytes
        try:
            with subprocess.Popen(
                argv,
                shell=False,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=dict(invocation.env) if invocation.env is not None else None,
            ) as proc:
                capture = self._capture(proc, limit)
                status = proc.wait()
        except OSError as exc:
            logger.warning("command_launch_failed", executable=invocation.executable, error=str(exc))
            raise CommandFailed(
                f"Failed to start {invocation.executable}: {exc}", stderr=str(exc)
            ) from exc

        if capture.timed_out.is_set():
            logger.warning(
                "command_timed_out", executable=invocation.executable, timeout=self._timeout
            )
            raise CommandFailed(f"{invocation.executable} timed out after {self._timeout:g} seconds")
        if capture.overflow:
            logger.warning("command_output_exceeded", executable=invocation.executable, limit=limit)
            raise CommandFailed(f"{invocation.executable} output exceeded {limit} bytes")

        stdout = b"".join(capture.stdout)
        stderr = b"".join(capture.stderr).decode(invocation.encoding, errors="replace")
        logger.debug(
            "command_executed",
            executable=invocation.executable,
            argc=len(invocation.args),
            status=status,
        )
        if status != 0:
            message = stderr.strip() or f"Command failed with status {status}"
            raise CommandFailed(message, status=status, stderr=stderr)

        output: str | bytes = (
            stdout if invocation.binary else stdout.decode(invocation.encoding, errors="replace")
        )
        return CommandResult(status=status, stdout=output, stderr=stderr)

    def _capture(self, proc: subprocess.Popen[bytes], limit: int) -> _Capture:
        """Drain both pipes of ``proc``, killing it on overflow or timeout."""

        capture = _Capture()

        def kill() -> None:
            if proc.poll() is None:
                proc.kill()

        def on_timeout() -> None:
            capture.timed_out.set()
            kill()

        def drain_stderr() -> None:
            if not _read_bounded(proc.stderr, limit, capture.stderr):
                capture.overflow = True
                kill()

        stderr_reader = threading.Thread(target=drain_stderr, daemon=True)
        stderr_reader.start()
        timer = threading.Timer(self._timeout, on_timeout) if self._timeout is not None else None
        if timer is not None:
            timer.daemon = True
            timer.start()
        try:
            if not _read_bounded(proc.stdout, limit, capture.stdout):
                capture.overflow = True
                kill()
            stderr_reader.join()
        finally:
            if timer is not None:
                timer.cancel()
        return capture

    def execute_safe(self, executable: str, args: Sequence[str] = ()) -> str:
        """Run a constant internal probe that carries no caller-supplied input."""

        result = self.execute(CommandInvocation(executable=executable, args=tuple(args)))
        return result.text
