"""
Review thread resolution - the only write path on the GraphQL surface.

Both functions return result objects and never raise.
"""
import asyncio
import logging
import time
from typing import Any, Dict, List

from . import github_client as gh
from .models import ResolveThreadOutcome, ResolveThreadResult, ResolveThreadsBatchResult
from .threads import is_not_found_error, join_error_messages

logger = logging.getLogger(__name__)

RESOLVE_THREAD_MUTATION = """
mutation ResolveReviewThread($input: ResolveReviewThreadInput!) {
  resolveReviewThread(input: $input) {
    thread {
      id
      isResolved
    }
  }
}
"""


def _is_forbidden(errors: List[Dict[str, Any]]) -> bool:
    return any(
        e.get("type") == "FORBIDDEN" or "Resource not accessible" in (e.get("message") or "")
        for e in errors
    )


async def resolve_pull_request_review_thread(thread_id: str) -> ResolveThreadResult:
    """
    Mark a review thread as resolved.

    Resolving an already-resolved thread succeeds; GitHub simply reports
    ``isResolved: true`` again.
    """
    try:
        variables = {
            "input": {
                "threadId": thread_id,
                "clientMutationId": f"resolve_thread_{int(time.time() * 1000)}",
            }
        }
        response = await gh.graphql_request(RESOLVE_THREAD_MUTATION, variables)

        errors = response.get("errors") or []
        if errors:
            if _is_forbidden(errors):
                return ResolveThreadResult(
                    success=False,
                    message="Permission denied: You don't have permission to resolve this thread",
                )
            if is_not_found_error(errors):
                return ResolveThreadResult(success=False, message="Thread ID not found or invalid")
            return ResolveThreadResult(success=False, message=f"GraphQL error: {join_error_messages(errors)}")

        payload = (response.get("data") or {}).get("resolveReviewThread") or {}
        resolved = bool((payload.get("thread") or {}).get("isResolved"))
        return ResolveThreadResult(
            success=resolved,
            message="Review thread resolved successfully" if resolved else "Failed to resolve thread",
        )
    except Exception as exc:
        logger.warning("Resolving thread %s failed: %s", thread_id, exc)
        return ResolveThreadResult(
            success=False,
            message=f"Failed to resolve review thread: {str(exc) or 'Unknown error'}",
        )


async def _resolve_one(thread_id: str) -> ResolveThreadOutcome:
    result = await resolve_pull_request_review_thread(thread_id)
    return ResolveThreadOutcome(thread_id=thread_id, success=result.success, message=result.message)


async def resolve_pull_request_review_threads_batch(thread_ids: List[str]) -> ResolveThreadsBatchResult:
    """
    Resolve several threads concurrently, one mutation per ID.

    All mutations are launched at once and awaited together; results keep
    the input order and one failure never stops the others.
    """
    if not thread_ids:
        return ResolveThreadsBatchResult(results=[], all_succeeded=True, success_count=0, failure_count=0)

    settled = await asyncio.gather(
        *(_resolve_one(thread_id) for thread_id in thread_ids),
        return_exceptions=True,
    )

    results: List[ResolveThreadOutcome] = []
    for thread_id, outcome in zip(thread_ids, settled):
        if isinstance(outcome, BaseException):
            outcome = ResolveThreadOutcome(
                thread_id=thread_id,
                success=False,
                message=f"Failed to resolve review thread: {outcome}",
            )
        results.append(outcome)

    success_count = sum(1 for r in results if r.success)
    failure_count = len(results) - success_count
    logger.info("Resolved %d/%d review threads", success_count, len(results))

    return ResolveThreadsBatchResult(
        results=results,
        all_succeeded=failure_count == 0,
        success_count=success_count,
        failure_count=failure_count,
    )
