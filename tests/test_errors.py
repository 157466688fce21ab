from datetime import datetime, timedelta, timezone

import pytest

from review_mcp_server.errors import (
    GitHubAuthenticationError,
    GitHubConflictError,
    GitHubError,
    GitHubPermissionError,
    GitHubRateLimitError,
    GitHubResourceNotFoundError,
    GitHubValidationError,
    create_github_error,
    format_github_error,
    is_github_error,
)


def test_github_error_carries_status_and_response():
    error = GitHubError("Test error", 500, {"detail": "error"})

    assert isinstance(error, Exception)
    assert str(error) == "Test error"
    assert error.status == 500
    assert error.response == {"detail": "error"}
    assert error.name == "GitHubError"


def test_not_found_error_names_resource():
    error = GitHubResourceNotFoundError("Repository")

    assert error.status == 404
    assert error.message == "Resource not found: Repository"
    assert error.response == {"message": "Repository not found"}


def test_default_messages():
    assert GitHubAuthenticationError().message == "Authentication failed"
    assert GitHubPermissionError().message == "Insufficient permissions"
    assert GitHubAuthenticationError("Invalid token").message == "Invalid token"


def test_rate_limit_error_keeps_reset_time():
    reset_at = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    error = GitHubRateLimitError("Rate limit exceeded", reset_at)

    assert error.status == 429
    assert error.reset_at == reset_at
    assert error.response == {"message": "Rate limit exceeded", "reset_at": reset_at.isoformat()}


@pytest.mark.parametrize(
    "status, body, cls, message",
    [
        (401, {"message": "Bad credentials"}, GitHubAuthenticationError, "Bad credentials"),
        (403, {"message": "Forbidden"}, GitHubPermissionError, "Forbidden"),
        (404, {"message": "Not Found"}, GitHubResourceNotFoundError, "Resource not found: Not Found"),
        (404, {}, GitHubResourceNotFoundError, "Resource not found: Resource"),
        (409, {}, GitHubConflictError, "Conflict occurred"),
        (422, {}, GitHubValidationError, "Validation failed"),
        (500, {"message": "Internal Server Error"}, GitHubError, "Internal Server Error"),
        (503, {}, GitHubError, "GitHub API error"),
        (500, None, GitHubError, "GitHub API error"),
        (502, "<html>Bad gateway</html>", GitHubError, "GitHub API error"),
    ],
)
def test_create_github_error_maps_status(status, body, cls, message):
    error = create_github_error(status, body)

    assert type(error) is cls
    assert error.message == message


def test_validation_error_keeps_error_list():
    body = {"message": "Validation Failed", "errors": [{"field": "body", "code": "missing"}]}
    error = create_github_error(422, body)

    assert error.status == 422
    assert error.response["errors"] == [{"field": "body", "code": "missing"}]


def test_rate_limit_reset_from_body():
    reset = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    error = create_github_error(429, {"message": "Too many requests", "reset_at": "2024-01-01T12:00:00Z"})

    assert isinstance(error, GitHubRateLimitError)
    assert error.message == "Too many requests"
    assert error.reset_at == reset


def test_rate_limit_reset_defaults_to_one_minute():
    before = datetime.now(timezone.utc)
    error = create_github_error(429, {})
    after = datetime.now(timezone.utc)

    assert before + timedelta(seconds=60) <= error.reset_at <= after + timedelta(seconds=60)


def test_is_github_error():
    assert is_github_error(GitHubConflictError("x"))
    assert is_github_error(GitHubRateLimitError())
    assert not is_github_error(ValueError("x"))
    assert not is_github_error({"status": 500, "message": "fake error"})
    assert not is_github_error(None)


def test_format_github_error():
    assert format_github_error(GitHubResourceNotFoundError("Repo")) == "Not Found: Resource not found: Repo"
    assert format_github_error(GitHubPermissionError()) == "Permission Denied: Insufficient permissions"
    assert format_github_error(GitHubAuthenticationError()) == "Authentication Failed: Authentication failed"
    assert format_github_error(GitHubConflictError("busy")) == "Conflict: busy"
    assert format_github_error(GitHubError("boom", 500)) == "GitHub API Error: boom"

    validation = format_github_error(GitHubValidationError("Validation failed", 422, {"errors": []}))
    assert validation.startswith("Validation Error: Validation failed\nDetails: ")

    reset_at = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    rate_limited = format_github_error(GitHubRateLimitError("slow down", reset_at))
    assert rate_limited == "Rate Limit Exceeded: slow down\nResets at: 2024-01-01T12:00:00+00:00"
