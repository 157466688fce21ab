"""Pull request review comments over the REST API. All calls raise on failure."""
import logging
from typing import List

from . import github_client as gh
from .models import PullRequestComment

logger = logging.getLogger(__name__)

COMMENTS_PAGE_SIZE = 100


async def get_pull_request_comment(owner: str, repo: str, comment_id: int) -> PullRequestComment:
    raw = await gh.github_request(gh.repo_url(owner, repo, f"/pulls/comments/{comment_id}"))
    return PullRequestComment.model_validate(raw)


async def get_pull_request_comments(owner: str, repo: str, pull_number: int) -> List[PullRequestComment]:
    """List review comments on a pull request (first page only, 100 per page)."""
    raw = await gh.github_request(
        gh.repo_url(owner, repo, f"/pulls/{pull_number}/comments"),
        params={"per_page": COMMENTS_PAGE_SIZE},
    )
    comments = [PullRequestComment.model_validate(c) for c in raw or []]
    logger.info(f"Fetched {len(comments)} review comments for {owner}/{repo}#{pull_number}")
    return comments


async def reply_to_pull_request_comment(
    owner: str,
    repo: str,
    pull_number: int,
    comment_id: int,
    body: str,
) -> PullRequestComment:
    """
    Reply to a review comment.

    The reply is a new comment; its ``pull_request_review_id`` may differ
    from the parent's.
    """
    raw = await gh.github_request(
        gh.repo_url(owner, repo, f"/pulls/{pull_number}/comments/{comment_id}/replies"),
        method="POST",
        body={"body": body},
    )
    return PullRequestComment.model_validate(raw)
