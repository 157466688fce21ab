"""
MCP Server - exposes the review tools over the Model Context Protocol.

Tools (callable actions):
    get_pull_request_review                   - fetch one review
    get_pull_request_reviews                  - list reviews on a PR
    create_pull_request_review                - submit a review
    get_pull_request_threads                  - list every review thread on a PR
    get_pull_request_review_threads           - list the threads of one review
    check_pull_request_review_resolution      - are all threads of a review resolved?
    resolve_pull_request_review_thread        - resolve one thread
    resolve_pull_request_review_threads_batch - resolve many threads concurrently
    get_pull_request_thread                   - fetch one thread with its comments
    get_pull_request_threads_batch            - fetch many threads in one query
    get_pull_request_comment                  - fetch one review comment
    get_pull_request_comments                 - list review comments on a PR
    reply_to_pull_request_comment             - reply to a review comment

The low-level ``Server`` is used so the tool list comes straight from
``TOOL_REGISTRY`` with each input model's JSON schema.
"""
import json
import logging
from typing import Any, Dict, List, Optional

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from . import __version__
from .errors import GitHubError, format_github_error
from .tools import TOOL_REGISTRY, dispatch

logger = logging.getLogger(__name__)

# ── Create the MCP server instance ────────────────────────────────────────

mcp_server = Server(
    "github-review-tools",
    version=__version__,
    instructions=(
        "MCP server for GitHub pull request review workflows: fetch reviews and "
        "review comments, reply to comments, and list, check and resolve review threads."
    ),
)


@mcp_server.list_tools()
async def list_tools() -> List[types.Tool]:
    return [
        types.Tool(
            name=tool.name,
            description=tool.description,
            inputSchema=tool.input_schema(),
        )
        for tool in TOOL_REGISTRY
    ]


@mcp_server.call_tool()
async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
    """Run a registered tool and return its result as pretty-printed JSON."""
    try:
        result = await dispatch(name, arguments)
    except GitHubError as exc:
        logger.warning("Tool %s failed: %s", name, exc)
        raise RuntimeError(format_github_error(exc)) from exc

    return [types.TextContent(type="text", text=json.dumps(result, indent=2))]


async def run_stdio() -> None:
    """Serve MCP over stdin/stdout until the client disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        await mcp_server.run(
            read_stream,
            write_stream,
            mcp_server.create_initialization_options(),
        )
