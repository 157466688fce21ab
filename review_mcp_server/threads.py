"""
Review thread queries over GitHub's GraphQL API.

Review threads only exist on the GraphQL surface and are keyed by opaque node
IDs. A thread is tied to a REST review indirectly: it belongs to review ``R``
when one of its loaded comments reports ``pullRequestReview.databaseId == R``.

``fetch_pull_request_threads`` raises on failure. Every other function here
folds failures into a result object with ``success=False``.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from . import github_client as gh
from .errors import GraphQLError
from .models import (
    ReviewResolutionStatus,
    ReviewThread,
    ReviewThreadNode,
    ReviewThreadsResult,
    ThreadConnection,
    ThreadError,
    ThreadResult,
    ThreadsBatchResult,
    ThreadSummary,
    UnresolvedThread,
    preview,
)

logger = logging.getLogger(__name__)

# List queries load 15 comments per thread, single and batch lookups load 50.
# Review correlation only sees the first 15 comments of each thread.
LIST_THREADS_PAGE = 100
LIST_COMMENTS_PAGE = 15
THREAD_COMMENTS_PAGE = 50

PULL_REQUEST_THREADS_QUERY = """
query GetPullRequestThreads($owner: String!, $repo: String!, $pullNumber: Int!) {
  repository(owner: $owner, name: $repo) {
    pullRequest(number: $pullNumber) {
      reviewThreads(first: %d) {
        nodes {
          id
          isResolved
          comments(first: %d) {
            nodes {
              pullRequestReview {
                id
                databaseId
              }
              author {
                login
              }
              bodyText
            }
          }
        }
      }
    }
  }
}
""" % (LIST_THREADS_PAGE, LIST_COMMENTS_PAGE)

THREAD_FIELDS_FRAGMENT = """
fragment ReviewThreadFields on PullRequestReviewThread {
  id
  isResolved
  comments(first: %d) {
    nodes {
      id
      databaseId
      bodyText
      createdAt
      author {
        login
      }
      pullRequestReview {
        databaseId
      }
    }
  }
}
""" % THREAD_COMMENTS_PAGE

THREAD_QUERY = """
query GetThread($threadId: ID!) {
  node(id: $threadId) {
    ...ReviewThreadFields
  }
}
""" + THREAD_FIELDS_FRAGMENT


def summarize_graphql_errors(errors: Sequence[Dict[str, Any]]) -> str:
    """Render GraphQL errors as ``"TYPE: message; TYPE: message"``."""
    parts = []
    for error in errors:
        rendered = ": ".join(str(p) for p in (error.get("type"), error.get("message")) if p)
        if rendered:
            parts.append(rendered)
    return "; ".join(parts)


def join_error_messages(errors: Sequence[Dict[str, Any]]) -> str:
    return ", ".join(str(e.get("message")) for e in errors)


def is_not_found_error(errors: Sequence[Dict[str, Any]]) -> bool:
    return any(
        e.get("type") == "NOT_FOUND" or "Could not resolve" in (e.get("message") or "")
        for e in errors
    )


# ── Fetch primitive (raising) ─────────────────────────────────────────────


async def fetch_pull_request_threads(owner: str, repo: str, pull_number: int) -> Optional[Dict[str, Any]]:
    """
    Fetch up to 100 review threads (15 comments each) for a pull request.

    Returns:
        The GraphQL ``data`` object, or None when the response has none.

    Raises:
        GraphQLError: the response carried a non-empty ``errors`` list.
        GitHubError / httpx.HTTPError: transport-level failure.
    """
    response = await gh.graphql_request(
        PULL_REQUEST_THREADS_QUERY,
        {"owner": owner, "repo": repo, "pullNumber": pull_number},
    )

    errors = response.get("errors") or []
    if errors:
        details = summarize_graphql_errors(errors) or "Unknown error"
        raise GraphQLError(f"GraphQL error while fetching review threads: {details}", errors)

    return response.get("data")


def _thread_nodes(data: Optional[Dict[str, Any]]) -> Optional[List[ReviewThreadNode]]:
    """Decode ``repository.pullRequest.reviewThreads`` or return None if absent."""
    pull_request = ((data or {}).get("repository") or {}).get("pullRequest") or {}
    connection = pull_request.get("reviewThreads")
    if not connection or connection.get("nodes") is None:
        return None
    return ThreadConnection.model_validate(connection).nodes


# ── Listing and correlation ───────────────────────────────────────────────


async def get_pull_request_threads(owner: str, repo: str, pull_number: int) -> ReviewThreadsResult:
    """List every review thread on a pull request, tagged with its review ID."""
    try:
        nodes = _thread_nodes(await fetch_pull_request_threads(owner, repo, pull_number))
        if nodes is None:
            return ReviewThreadsResult(threads=[], success=True)

        threads = []
        for node in nodes:
            first = node.first_comment
            threads.append(
                ThreadSummary(
                    id=node.id,
                    is_resolved=node.is_resolved,
                    review_id=first.review_database_id if first else None,
                    first_comment=preview(first.body_text) if first else None,
                )
            )
        return ReviewThreadsResult(threads=threads, success=True)
    except Exception as exc:
        logger.warning("Fetching threads for %s/%s#%s failed: %s", owner, repo, pull_number, exc)
        return ReviewThreadsResult(threads=[], success=False, error=str(exc) or "Unknown error fetching threads")


async def _review_thread_nodes(owner: str, repo: str, pull_number: int, review_id: int) -> Optional[List[ReviewThreadNode]]:
    nodes = _thread_nodes(await fetch_pull_request_threads(owner, repo, pull_number))
    if nodes is None:
        return None
    return [node for node in nodes if node.belongs_to_review(review_id)]


async def get_pull_request_review_threads(
    owner: str,
    repo: str,
    pull_number: int,
    review_id: int,
) -> ReviewThreadsResult:
    """List the threads that belong to one review."""
    try:
        nodes = await _review_thread_nodes(owner, repo, pull_number, review_id)
        threads = [
            ThreadSummary(
                id=node.id,
                is_resolved=node.is_resolved,
                first_comment=preview(node.first_comment.body_text) if node.first_comment else None,
            )
            for node in nodes or []
        ]
        return ReviewThreadsResult(threads=threads, success=True)
    except Exception as exc:
        logger.warning("Fetching threads for review %s failed: %s", review_id, exc)
        return ReviewThreadsResult(threads=[], success=False, error=str(exc) or "Unknown error fetching review threads")


async def check_pull_request_review_resolution(
    owner: str,
    repo: str,
    pull_number: int,
    review_id: int,
) -> ReviewResolutionStatus:
    """
    Report whether every thread of a review is resolved.

    A review with no threads counts as fully resolved.
    """
    try:
        nodes = await _review_thread_nodes(owner, repo, pull_number, review_id) or []
        unresolved = [
            UnresolvedThread(
                id=node.id,
                first_comment=preview(node.first_comment.body_text) if node.first_comment else None,
            )
            for node in nodes
            if not node.is_resolved
        ]
        return ReviewResolutionStatus(
            all_resolved=not unresolved,
            total_threads=len(nodes),
            resolved_threads=sum(1 for node in nodes if node.is_resolved),
            unresolved_threads=unresolved,
            success=True,
        )
    except Exception as exc:
        logger.warning("Resolution check for review %s failed: %s", review_id, exc)
        return ReviewResolutionStatus(
            all_resolved=False,
            total_threads=0,
            resolved_threads=0,
            unresolved_threads=[],
            success=False,
            error=str(exc) or "Unknown error checking resolution status",
        )


# ── Lookup by node ID ─────────────────────────────────────────────────────


async def get_pull_request_thread(thread_id: str) -> ThreadResult:
    """Fetch one review thread (up to 50 comments) by its GraphQL node ID."""
    try:
        response = await gh.graphql_request(THREAD_QUERY, {"threadId": thread_id})

        errors = response.get("errors") or []
        if errors:
            if is_not_found_error(errors):
                message = "Thread ID not found or invalid"
            else:
                message = f"GraphQL error: {join_error_messages(errors)}"
            return ThreadResult(thread=None, success=False, message=message)

        raw = (response.get("data") or {}).get("node")
        # Nodes of another type match no fragment field and come back as {}.
        if not raw or not raw.get("id"):
            return ThreadResult(thread=None, success=False, message="Thread not found")

        thread = ReviewThread.from_node(ReviewThreadNode.model_validate(raw))
        return ThreadResult(thread=thread, success=True, message="Thread retrieved successfully")
    except Exception as exc:
        logger.warning("Fetching thread %s failed: %s", thread_id, exc)
        return ThreadResult(thread=None, success=False, message=f"Failed to fetch thread: {str(exc) or 'Unknown error'}")


def build_threads_batch_query(count: int) -> str:
    """One aliased ``node`` lookup per ID, each bound to its own ``$id<i>`` variable."""
    params = ", ".join(f"$id{i}: ID!" for i in range(count))
    lookups = "\n".join(
        f"  thread{i}: node(id: $id{i}) {{\n    ...ReviewThreadFields\n  }}" for i in range(count)
    )
    return f"query GetThreadsBatch({params}) {{\n{lookups}\n}}\n" + THREAD_FIELDS_FRAGMENT


async def get_pull_request_threads_batch(thread_ids: List[str]) -> ThreadsBatchResult:
    """
    Fetch several review threads in a single GraphQL round trip.

    Missing threads are reported per ID; a top-level GraphQL error fails the
    whole batch.
    """
    if not thread_ids:
        return ThreadsBatchResult(threads=[], errors=[], success=True)

    try:
        response = await gh.graphql_request(
            build_threads_batch_query(len(thread_ids)),
            {f"id{i}": thread_id for i, thread_id in enumerate(thread_ids)},
        )

        errors = response.get("errors") or []
        if errors:
            return ThreadsBatchResult(
                threads=[],
                errors=[ThreadError(thread_id="batch", message=f"GraphQL error: {summarize_graphql_errors(errors)}")],
                success=False,
            )

        data = response.get("data") or {}
        threads: List[ReviewThread] = []
        missing: List[ThreadError] = []
        for index, thread_id in enumerate(thread_ids):
            raw = data.get(f"thread{index}")
            if not raw or not raw.get("id"):
                missing.append(ThreadError(thread_id=thread_id, message="Thread not found"))
                continue
            threads.append(ReviewThread.from_node(ReviewThreadNode.model_validate(raw)))

        return ThreadsBatchResult(threads=threads, errors=missing, success=not missing)
    except Exception as exc:
        logger.warning("Batch thread fetch failed: %s", exc)
        return ThreadsBatchResult(
            threads=[],
            errors=[ThreadError(thread_id="batch", message=str(exc) or "Unknown error")],
            success=False,
        )
