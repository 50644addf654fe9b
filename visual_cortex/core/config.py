"""Configuration management for the simulator bridge."""

from functools import lru_cache
from pathlib import Path, PurePosixPath
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_REPO_ROOT = Path(__file__).resolve().parents[2]
_PACKAGE_DIR = Path(__file__).resolve().parents[1]
# Repository root .env first, then the package directory, then the working directory.
_ENV_FILE_CANDIDATES: tuple[str, ...] = (
    str(_REPO_ROOT / ".env"),
    str(_PACKAGE_DIR / ".env"),
    ".env",
)

DEFAULT_MAX_OUTPUT_BYTES = 10 * 1024 * 1024


class CortexSettings(BaseSettings):
    """Centralised configuration derived from environment variables."""

    app_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: str | None = Field(
        None,
        description="Log file path; None or an empty string disables file output",
    )

    server_name: str = Field("visual-cortex", description="Name advertised to MCP clients")
    transport: Literal["stdio", "http"] = Field("stdio", description="MCP transport")
    http_host: str = Field("127.0.0.1", description="Bind host for the http transport")
    http_port: int = Field(8765, description="Bind port for the http transport")

    xcrun_path: str = Field(
        "/usr/bin/xcrun", description="Absolute path of the xcrun executable"
    )
    axe_path: str = Field(
        "/opt/homebrew/bin/axe", description="Absolute path of the AXe automation CLI"
    )
    max_output_bytes: int = Field(
        DEFAULT_MAX_OUTPUT_BYTES,
        gt=0,
        description="Ceiling for captured stdout/stderr of a single command",
    )
    command_timeout_seconds: float | None = Field(
        None,
        gt=0,
        description="Optional wall-clock limit for a single external command",
    )

    model_config = SettingsConfigDict(
        env_prefix="VISUAL_CORTEX_",
        env_file=_ENV_FILE_CANDIDATES,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @field_validator("xcrun_path", "axe_path")
    @classmethod
    def _require_absolute_path(cls, value: str) -> str:
        value = value.strip()
        if not PurePosixPath(value).is_absolute():
            msg = f"executable path must be absolute, got {value!r}"
            raise ValueError(msg)
        return value


@lru_cache
def get_settings() -> CortexSettings:
    """Return a cached CortexSettings instance."""

    return CortexSettings()


def resolved_env_file() -> str | None:
    """Return the first readable .env file from the candidate list."""

    for candidate in _ENV_FILE_CANDIDATES:
        path = Path(candidate).expanduser()
        if path.is_file():
            return str(path)
    return None
