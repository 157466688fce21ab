"""
GitHub HTTP client - the single I/O seam for REST and GraphQL calls.

Every call is one request/response round trip on a short-lived
``httpx.AsyncClient``; there is no retry, caching or pagination here.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from . import __version__
from .config import settings
from .errors import create_github_error

logger = logging.getLogger(__name__)

# ── Helpers ────────────────────────────────────────────────────────────────


def _headers() -> Dict[str, str]:
    h = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
        "User-Agent": f"github-review-tools/{__version__}",
    }
    if settings.github_token:
        h["Authorization"] = f"Bearer {settings.github_token}"
    return h


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.request_timeout)


def repo_url(owner: str, repo: str, path: str = "") -> str:
    base = settings.github_api_base.rstrip("/")
    return f"{base}/repos/{owner}/{repo}{path}"


def _decode_body(resp: httpx.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text


# ── Core request helpers ──────────────────────────────────────────────────


async def github_request(
    url: str,
    method: str = "GET",
    body: Optional[Any] = None,
    params: Optional[Dict[str, Any]] = None,
) -> Any:
    """
    Perform a GitHub API request and return the decoded JSON body.

    Raises:
        GitHubError: (or a subclass) for any non-2xx response.
        httpx.HTTPError: for transport failures (connection, timeout).
    """
    async with _client() as client:
        resp = await client.request(
            method,
            url,
            headers=_headers(),
            params=params,
            json=body,
        )

    payload = _decode_body(resp)
    if resp.is_success:
        return payload

    logger.warning("GitHub %s %s failed with %s", method, url, resp.status_code)
    raise create_github_error(resp.status_code, payload)


async def graphql_request(query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    POST a GraphQL document and return the whole response object.

    The ``errors`` list is left in place for the caller to classify.
    """
    response = await github_request(
        settings.github_graphql_url,
        method="POST",
        body={"query": query, "variables": variables or {}},
    )
    return response if isinstance(response, dict) else {}
