import pytest
from pydantic import ValidationError

from review_mcp_server.comments import (
    get_pull_request_comment,
    get_pull_request_comments,
    reply_to_pull_request_comment,
)
from review_mcp_server.errors import GitHubPermissionError
from review_mcp_server.reviews import (
    create_pull_request_review,
    get_pull_request_review,
    get_pull_request_reviews,
)

API = "https://api.github.com/repos/owner/repo"


@pytest.mark.asyncio
async def test_get_pull_request_review(mock_github_request, review_payload):
    mock_github_request.return_value = review_payload

    review = await get_pull_request_review("owner", "repo", 1, 80)

    assert review.id == 80
    assert review.state == "CHANGES_REQUESTED"
    assert review.user.login == "reviewer"
    mock_github_request.assert_awaited_once_with(f"{API}/pulls/1/reviews/80")


@pytest.mark.asyncio
async def test_pending_review_has_null_submission_time(mock_github_request, review_payload):
    mock_github_request.return_value = {**review_payload, "state": "PENDING", "submitted_at": None, "body": None}

    review = await get_pull_request_review("owner", "repo", 1, 80)

    assert review.submitted_at is None
    assert review.to_payload()["body"] is None


@pytest.mark.asyncio
async def test_review_with_unknown_state_fails_to_decode(mock_github_request, review_payload):
    mock_github_request.return_value = {**review_payload, "state": "SHIPPED"}

    with pytest.raises(ValidationError):
        await get_pull_request_review("owner", "repo", 1, 80)


@pytest.mark.asyncio
async def test_review_fetch_propagates_github_errors(mock_github_request):
    mock_github_request.side_effect = GitHubPermissionError()

    with pytest.raises(GitHubPermissionError):
        await get_pull_request_review("owner", "repo", 1, 80)


@pytest.mark.asyncio
async def test_get_pull_request_reviews_uses_fixed_page(mock_github_request, review_payload):
    mock_github_request.return_value = [review_payload, {**review_payload, "id": 81, "state": "APPROVED"}]

    reviews = await get_pull_request_reviews("owner", "repo", 1)

    assert [r.id for r in reviews] == [80, 81]
    mock_github_request.assert_awaited_once_with(f"{API}/pulls/1/reviews", params={"per_page": 100})


@pytest.mark.asyncio
async def test_create_pull_request_review(mock_github_request, review_payload):
    mock_github_request.return_value = {**review_payload, "state": "COMMENTED"}
    inline = [{"path": "src/file.py", "position": 3, "body": "nit"}]

    review = await create_pull_request_review(
        "owner", "repo", 1, body="Looks fine", event="COMMENT", comments=inline
    )

    assert review.state == "COMMENTED"
    mock_github_request.assert_awaited_once_with(
        f"{API}/pulls/1/reviews",
        method="POST",
        body={"body": "Looks fine", "event": "COMMENT", "comments": inline},
    )


@pytest.mark.asyncio
async def test_get_pull_request_comment(mock_github_request, comment_payload):
    mock_github_request.return_value = comment_payload

    comment = await get_pull_request_comment("owner", "repo", 1)

    assert comment.pull_request_review_id == 80
    assert comment.to_payload() == comment_payload
    mock_github_request.assert_awaited_once_with(f"{API}/pulls/comments/1")


@pytest.mark.asyncio
async def test_general_comment_has_no_review(mock_github_request, comment_payload):
    mock_github_request.return_value = {**comment_payload, "pull_request_review_id": None, "position": None}

    comment = await get_pull_request_comment("owner", "repo", 1)

    assert comment.pull_request_review_id is None
    assert comment.position is None


@pytest.mark.asyncio
async def test_get_pull_request_comments(mock_github_request, comment_payload):
    mock_github_request.return_value = [comment_payload]

    comments = await get_pull_request_comments("owner", "repo", 1)

    assert len(comments) == 1
    mock_github_request.assert_awaited_once_with(f"{API}/pulls/1/comments", params={"per_page": 100})


@pytest.mark.asyncio
async def test_reply_to_pull_request_comment(mock_github_request, comment_payload):
    reply = {**comment_payload, "id": 2, "body": "Thanks for the feedback!", "pull_request_review_id": 91}
    mock_github_request.return_value = reply

    result = await reply_to_pull_request_comment("owner", "repo", 1, 1, "Thanks for the feedback!")

    assert result.id == 2
    assert result.body == "Thanks for the feedback!"
    assert result.pull_request_review_id == 91
    mock_github_request.assert_awaited_once_with(
        f"{API}/pulls/1/comments/1/replies",
        method="POST",
        body={"body": "Thanks for the feedback!"},
    )


@pytest.mark.asyncio
async def test_reply_propagates_errors(mock_github_request):
    mock_github_request.side_effect = RuntimeError("Network error")

    with pytest.raises(RuntimeError, match="Network error"):
        await reply_to_pull_request_comment("owner", "repo", 1, 1, "Reply")


@pytest.mark.asyncio
async def test_comment_missing_links_fails_to_decode(mock_github_request, comment_payload):
    broken = dict(comment_payload)
    del broken["_links"]
    mock_github_request.return_value = broken

    with pytest.raises(ValidationError):
        await get_pull_request_comment("owner", "repo", 1)
