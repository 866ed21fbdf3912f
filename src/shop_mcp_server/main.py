"""Entry point for the shop MCP server."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from shop_mcp.errors import ConfigurationError
from shop_mcp_server.config import load_settings
from shop_mcp_server.fastmcp_adapter import build_fastmcp_app

logger = logging.getLogger(__name__)

TRANSPORTS = ("stdio", "http", "sse", "streamable-http")


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(description="Run the shop MCP server.")
    parser.add_argument(
        "--transport",
        choices=TRANSPORTS,
        default="stdio",
        help="Transport used to talk to the client (default: stdio).",
    )
    parser.add_argument("--host", help="Bind address for network transports.")
    parser.add_argument("--port", type=int, help="Port for network transports.")
    parser.add_argument("--path", help="URL path for network transports.")
    parser.add_argument(
        "--catalog",
        action="store_true",
        help="Print the tool, resource and prompt catalog as JSON and exit.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        help="Logging level; overrides SHOP_MCP_LOG_LEVEL.",
    )
    return parser


def _configure_logging(level: str) -> None:
    # stdout carries the stdio transport, so logs go to stderr.
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ConfigurationError as error:
        _configure_logging(args.log_level or "INFO")
        logger.error("Configuration error: %s", error)
        return 2
    _configure_logging(args.log_level or settings.log_level)

    app, dispatcher = build_fastmcp_app(settings)

    if args.catalog:
        print(json.dumps(dispatcher.registry.to_catalog(), indent=2))
        return 0

    network_options = {"host": args.host, "port": args.port, "path": args.path}
    run_kwargs = {
        key: value for key, value in network_options.items() if value is not None
    }
    try:
        app.run(transport=args.transport, **run_kwargs)
    except Exception:
        logger.exception("Error starting server")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
