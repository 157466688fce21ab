"""
Pull request reviews over the REST API.

These calls raise: HTTP failures surface as ``GitHubError`` subclasses and
payloads that do not decode surface as ``pydantic.ValidationError``.
"""
import logging
from typing import Any, Dict, List, Optional

from . import github_client as gh
from .models import PullRequestReview, ReviewEvent

logger = logging.getLogger(__name__)

REVIEWS_PAGE_SIZE = 100


async def get_pull_request_review(owner: str, repo: str, pull_number: int, review_id: int) -> PullRequestReview:
    """Fetch a single review on a pull request."""
    raw = await gh.github_request(gh.repo_url(owner, repo, f"/pulls/{pull_number}/reviews/{review_id}"))
    return PullRequestReview.model_validate(raw)


async def get_pull_request_reviews(owner: str, repo: str, pull_number: int) -> List[PullRequestReview]:
    """List the reviews on a pull request (first page only, 100 per page)."""
    raw = await gh.github_request(
        gh.repo_url(owner, repo, f"/pulls/{pull_number}/reviews"),
        params={"per_page": REVIEWS_PAGE_SIZE},
    )
    reviews = [PullRequestReview.model_validate(r) for r in raw or []]
    logger.info(f"Fetched {len(reviews)} reviews for {owner}/{repo}#{pull_number}")
    return reviews


async def create_pull_request_review(
    owner: str,
    repo: str,
    pull_number: int,
    body: str,
    event: ReviewEvent,
    commit_id: Optional[str] = None,
    comments: Optional[List[Dict[str, Any]]] = None,
) -> PullRequestReview:
    """
    Submit a review on a pull request.

    Args:
        body: Review summary text.
        event: APPROVE, REQUEST_CHANGES or COMMENT.
        commit_id: SHA the review applies to (defaults to the PR head).
        comments: Inline comments, each ``{path, position, body}``.
    """
    payload: Dict[str, Any] = {"body": body, "event": event}
    if commit_id:
        payload["commit_id"] = commit_id
    if comments:
        payload["comments"] = comments

    raw = await gh.github_request(
        gh.repo_url(owner, repo, f"/pulls/{pull_number}/reviews"),
        method="POST",
        body=payload,
    )
    return PullRequestReview.model_validate(raw)
