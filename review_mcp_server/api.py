"""
GitHub Review Tools - Combined MCP (SSE transport) + REST API

MCP Protocol endpoints (for any MCP client):
    GET  /mcp/sse        - SSE connection endpoint
    POST /mcp/messages   - MCP message handler

REST API endpoints (for non-MCP clients):
    GET  /health
    GET  /api/tools           - tool names, descriptions and input schemas
    POST /api/tools/{name}    - run a tool; JSON body holds its arguments
"""
import logging
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from mcp.server.sse import SseServerTransport
from starlette.requests import Request
from starlette.routing import Route

from . import __version__
from .config import settings
from .errors import GitHubError, GraphQLError, format_github_error
from .tools import TOOL_REGISTRY, ToolInputError, UnknownToolError, dispatch

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# MCP SSE Transport
# ---------------------------------------------------------------------------
_sse_transport = SseServerTransport("/mcp/messages")


async def _handle_mcp_sse(request: Request):
    """Accept an MCP client connection over SSE."""
    from .server import mcp_server

    async with _sse_transport.connect_sse(
        request.scope, request.receive, request._send
    ) as (read_stream, write_stream):
        await mcp_server.run(
            read_stream,
            write_stream,
            mcp_server.create_initialization_options(),
        )


# ---------------------------------------------------------------------------
# FastAPI App
# ---------------------------------------------------------------------------
app = FastAPI(
    title="GitHub Review Tools",
    description="MCP server (SSE transport) + REST bridge for GitHub pull request review tools",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount MCP protocol endpoints inside the same app
app.router.routes.insert(0, Route("/mcp/sse", endpoint=_handle_mcp_sse))
app.mount("/mcp/messages", app=_sse_transport.handle_post_message)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
def health():
    return {
        "status": "ok",
        "service": "github-review-tools",
        "mcp_sse_endpoint": "/mcp/sse",
        "github_configured": bool(settings.github_token),
        "tools": len(TOOL_REGISTRY),
    }


# ---------------------------------------------------------------------------
# REST Endpoints
# ---------------------------------------------------------------------------
@app.get("/api/tools")
def api_list_tools():
    """List every tool with its input schema."""
    return [
        {
            "name": tool.name,
            "description": tool.description,
            "input_schema": tool.input_schema(),
        }
        for tool in TOOL_REGISTRY
    ]


@app.post("/api/tools/{name}")
async def api_call_tool(name: str, arguments: Optional[Dict[str, Any]] = Body(default=None)):
    """Run a tool. Result-returning tools always answer 200; check ``success``."""
    try:
        return await dispatch(name, arguments)
    except UnknownToolError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ToolInputError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except GitHubError as exc:
        logger.warning("Tool %s failed with GitHub %s", name, exc.status)
        status = exc.status if 400 <= exc.status < 600 else 502
        raise HTTPException(status_code=status, detail=format_github_error(exc))
    except GraphQLError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    except Exception as exc:
        logger.exception("Error running tool %s", name)
        raise HTTPException(status_code=502, detail=str(exc))
