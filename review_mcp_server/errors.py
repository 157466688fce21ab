"""
Error taxonomy for GitHub API failures.

REST calls that come back non-2xx are mapped onto one exception class per
status family by :func:`create_github_error`. GraphQL business errors arrive
inside a 200 response and never pass through this mapping; the thread
operations classify those themselves.
"""
import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional


class GitHubError(Exception):
    """Base error for any non-2xx GitHub response."""

    def __init__(self, message: str, status: int, response: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.response = response

    @property
    def name(self) -> str:
        return type(self).__name__


class GitHubValidationError(GitHubError):
    """422 - the request body was rejected; ``response`` keeps the error list."""


class GitHubResourceNotFoundError(GitHubError):
    def __init__(self, resource: str):
        super().__init__(
            f"Resource not found: {resource}",
            404,
            {"message": f"{resource} not found"},
        )
        self.resource = resource


class GitHubAuthenticationError(GitHubError):
    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, 401, {"message": message})


class GitHubPermissionError(GitHubError):
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message, 403, {"message": message})


class GitHubRateLimitError(GitHubError):
    def __init__(self, message: Optional[str] = None, reset_at: Optional[datetime] = None):
        message = message or "Rate limit exceeded"
        reset_at = reset_at or datetime.now(timezone.utc) + timedelta(seconds=60)
        super().__init__(
            message,
            429,
            {"message": message, "reset_at": reset_at.isoformat()},
        )
        self.reset_at = reset_at


class GitHubConflictError(GitHubError):
    def __init__(self, message: str = "Conflict occurred"):
        super().__init__(message, 409, {"message": message})


class GraphQLError(Exception):
    """Raised by fetch helpers when a GraphQL response carries an ``errors`` list."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


def is_github_error(value: Any) -> bool:
    return isinstance(value, GitHubError)


def _parse_reset_at(raw: Any) -> Optional[datetime]:
    if not raw:
        return None
    if isinstance(raw, (int, float)):
        return datetime.fromtimestamp(raw, tz=timezone.utc)
    try:
        return datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        return None


def create_github_error(status: int, response: Any) -> GitHubError:
    """
    Map an HTTP status and decoded error body onto the matching error class.

    Args:
        status: HTTP status code of the failed response.
        response: Decoded JSON body (dict), raw text, or None.

    Returns:
        A :class:`GitHubError` subclass instance (not raised).
    """
    body: Dict[str, Any] = response if isinstance(response, dict) else {}
    message = body.get("message")

    if status == 401:
        return GitHubAuthenticationError(message or "Authentication failed")
    if status == 403:
        return GitHubPermissionError(message or "Insufficient permissions")
    if status == 404:
        return GitHubResourceNotFoundError(message or "Resource")
    if status == 409:
        return GitHubConflictError(message or "Conflict occurred")
    if status == 422:
        return GitHubValidationError(message or "Validation failed", status, response)
    if status == 429:
        return GitHubRateLimitError(message or "Rate limit exceeded", _parse_reset_at(body.get("reset_at")))
    return GitHubError(message or "GitHub API error", status, response)


def format_github_error(error: GitHubError) -> str:
    """Render a GitHub error for the outermost (tool caller) layer."""
    if isinstance(error, GitHubValidationError):
        message = f"Validation Error: {error.message}"
        if error.response:
            message += f"\nDetails: {json.dumps(error.response, default=str)}"
        return message
    if isinstance(error, GitHubResourceNotFoundError):
        return f"Not Found: {error.message}"
    if isinstance(error, GitHubAuthenticationError):
        return f"Authentication Failed: {error.message}"
    if isinstance(error, GitHubPermissionError):
        return f"Permission Denied: {error.message}"
    if isinstance(error, GitHubRateLimitError):
        return f"Rate Limit Exceeded: {error.message}\nResets at: {error.reset_at.isoformat()}"
    if isinstance(error, GitHubConflictError):
        return f"Conflict: {error.message}"
    return f"GitHub API Error: {error.message}"
