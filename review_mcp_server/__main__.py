"""Entry-point for the GitHub Review Tools server."""
import argparse
import asyncio
import logging
import sys

import uvicorn

from .config import settings
from .logger import setup_logging

logger = logging.getLogger(__name__)


def _run_mcp_stdio():
    from .server import run_stdio
    logger.info("Starting GitHub Review Tools (stdio transport)")
    asyncio.run(run_stdio())


def _run_http():
    """Start the combined MCP SSE + REST app (passes the app object directly)."""
    from .api import app as http_app

    logger.info(
        "Starting GitHub Review Tools (SSE + REST) on %s:%s",
        settings.mcp_server_host, settings.mcp_server_port,
    )
    uvicorn.run(
        http_app,
        host=settings.mcp_server_host,
        port=settings.mcp_server_port,
        log_level=settings.log_level.lower(),
    )


def main():
    setup_logging(level=settings.log_level, log_file=settings.log_file)

    parser = argparse.ArgumentParser(description="GitHub Review Tools MCP Server")
    parser.add_argument(
        "--mode",
        choices=["mcp-stdio", "http"],
        default="mcp-stdio",
        help="mcp-stdio | http (MCP over SSE plus the REST bridge)",
    )
    args = parser.parse_args()

    if not settings.github_token:
        logger.critical("GITHUB_PERSONAL_ACCESS_TOKEN environment variable is required but not set.")
        logger.critical("Please set GITHUB_PERSONAL_ACCESS_TOKEN to a valid GitHub Personal Access Token.")
        sys.exit(1)

    if args.mode == "mcp-stdio":
        _run_mcp_stdio()
    elif args.mode == "http":
        _run_http()


if __name__ == "__main__":
    main()
