"""Run the visual-cortex MCP server.

Uses the transport configured through ``VISUAL_CORTEX_TRANSPORT`` (``stdio``
by default, which is what editor integrations launch).
"""

from __future__ import annotations

import sys

from pydantic import ValidationError


def main() -> None:
    try:
        from visual_cortex.core.config import get_settings, resolved_env_file

        settings = get_settings()
    except ValidationError as exc:
        print(f"[visual-cortex] invalid configuration:\n{exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    from visual_cortex.core.command_gateway import build_allow_list
    from visual_cortex.core.logging_config import configure_logging, get_logger
    from visual_cortex.mcp.server import build_server

    configure_logging()
    logger = get_logger(__name__)
    logger.info(
        "server_startup",
        env=settings.app_env,
        transport=settings.transport,
        env_file=resolved_env_file() or "not-found",
        allow_list=dict(build_allow_list(settings)),
    )

    server = build_server()
    if settings.transport == "http":
        server.run(transport="http", host=settings.http_host, port=settings.http_port)
    else:
        server.run(transport="stdio", show_banner=False)
    logger.info("server_shutdown")


if __name__ == "__main__":
    main()
