"""Command-line entry point: run the inventory MCP server over stdio or HTTP."""

from __future__ import annotations

import argparse
import hmac
import logging
import sys
from typing import Any

import uvicorn
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from inventory_mcp.config import Settings
from inventory_mcp.server import mcp

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
API_KEY_HEADER = "x-api-key"


class ApiKeyMiddleware:
    """Reject HTTP requests whose ``x-api-key`` header does not match."""

    def __init__(self, app: ASGIApp, *, api_key: str, header_name: str = API_KEY_HEADER) -> None:
        self.app = app
        self.api_key = api_key
        self.header_name = header_name.lower().encode("latin-1")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        supplied = b""
        for name, value in scope.get("headers", []):
            if name.lower() == self.header_name:
                supplied = value
                break

        if not hmac.compare_digest(supplied, self.api_key.encode("latin-1")):
            logger.warning("Rejected request to %s: invalid API key", scope.get("path", ""))
            response = JSONResponse({"error": "Unauthorized"}, status_code=401)
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)


def configure_logging(level: str) -> None:
    # stdout carries the stdio transport, so logs go to stderr.
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.handlers = [console_handler]


def build_http_app(api_key: str) -> Any:
    if not api_key:
        raise SystemExit("API_KEY must be set to serve over HTTP.")
    return ApiKeyMiddleware(mcp.streamable_http_app(), api_key=api_key)


def parse_args(argv: list[str] | None, settings: Settings) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Vehicle inventory MCP server")
    parser.add_argument(
        "--mode",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport to serve on (default: stdio)",
    )
    parser.add_argument("--host", default="127.0.0.1", help="HTTP bind host")
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help="HTTP port (default: $PORT or 3000)",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    settings = Settings.from_env()
    args = parse_args(argv, settings)
    configure_logging(args.log_level)

    if args.mode == "http":
        app = build_http_app(settings.api_key)
        logger.info("Starting inventory MCP over HTTP on %s:%d", args.host, args.port)
        uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())
        return

    logger.info("Starting inventory MCP over stdio")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
