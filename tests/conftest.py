"""Shared fixtures: mocked GitHub transport and sample REST/GraphQL payloads."""
from unittest.mock import AsyncMock, patch

import pytest


@pytest.fixture
def mock_graphql():
    with patch("review_mcp_server.github_client.graphql_request", new_callable=AsyncMock) as mocked:
        yield mocked


@pytest.fixture
def mock_github_request():
    with patch("review_mcp_server.github_client.github_request", new_callable=AsyncMock) as mocked:
        yield mocked


@pytest.fixture
def github_user():
    return {
        "login": "reviewer",
        "id": 1,
        "avatar_url": "https://example.com/avatar.png",
        "url": "https://api.github.com/users/reviewer",
        "html_url": "https://github.com/reviewer",
    }


@pytest.fixture
def review_payload(github_user):
    return {
        "id": 80,
        "node_id": "PRR_kwDOtest80",
        "user": github_user,
        "body": "A few things to fix",
        "state": "CHANGES_REQUESTED",
        "html_url": "https://github.com/owner/repo/pull/1#pullrequestreview-80",
        "pull_request_url": "https://api.github.com/repos/owner/repo/pulls/1",
        "commit_id": "ecdd80bb57125d7ba9641ffaa4d7d2c19d3f3091",
        "submitted_at": "2024-01-01T00:00:00Z",
        "author_association": "COLLABORATOR",
    }


@pytest.fixture
def comment_payload(github_user):
    return {
        "url": "https://api.github.com/repos/owner/repo/pulls/comments/1",
        "id": 1,
        "node_id": "PRRC_1",
        "pull_request_review_id": 80,
        "diff_hunk": "@@ -1,3 +1,4 @@\n line1\n line2\n+line3",
        "path": "src/file.py",
        "position": 5,
        "original_position": 5,
        "commit_id": "abc123",
        "original_commit_id": "abc123",
        "user": github_user,
        "body": "Please fix this",
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-01-01T00:00:00Z",
        "html_url": "https://github.com/owner/repo/pull/1#discussion_r1",
        "pull_request_url": "https://api.github.com/repos/owner/repo/pulls/1",
        "author_association": "CONTRIBUTOR",
        "_links": {
            "self": {"href": "https://api.github.com/repos/owner/repo/pulls/comments/1"},
            "html": {"href": "https://github.com/owner/repo/pull/1#discussion_r1"},
            "pull_request": {"href": "https://api.github.com/repos/owner/repo/pulls/1"},
        },
    }


def _list_comment(review_id, body, login="reviewer"):
    return {
        "pullRequestReview": {"id": f"PRR_{review_id}", "databaseId": review_id} if review_id else None,
        "author": {"login": login},
        "bodyText": body,
    }


@pytest.fixture
def list_comment():
    """Factory for a comment node as returned by the thread listing query."""
    return _list_comment


@pytest.fixture
def threads_response():
    """Factory wrapping thread nodes in a full listing response."""
    def _build(*threads):
        return {"data": {"repository": {"pullRequest": {"reviewThreads": {"nodes": list(threads)}}}}}
    return _build


@pytest.fixture
def thread_node():
    """Factory for a thread node as returned by the by-ID queries."""
    def _build(thread_id, is_resolved=False, review_id=80, bodies=("Comment 1",)):
        return {
            "id": thread_id,
            "isResolved": is_resolved,
            "comments": {
                "nodes": [
                    {
                        "id": f"PRRC_{thread_id}_{i}",
                        "databaseId": 1000 + i,
                        "bodyText": body,
                        "createdAt": "2024-01-01T00:00:00Z",
                        "author": {"login": "reviewer"},
                        "pullRequestReview": {"databaseId": review_id},
                    }
                    for i, body in enumerate(bodies)
                ]
            },
        }
    return _build
