"""
Tool contracts and the static tool registry.

Each tool is a :class:`ToolSpec`: a unique name, a description, a pydantic
input model (its JSON schema is what MCP clients see) and an async entry
point that takes the validated input. ``TOOL_REGISTRY`` lists every tool
explicitly; both the MCP server and the REST bridge dispatch through it.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional, Type

from pydantic import BaseModel, Field, ValidationError

from . import comments, resolution, reviews, threads

logger = logging.getLogger(__name__)


class ToolError(Exception):
    """Raised by :func:`dispatch` before a tool runs."""


class UnknownToolError(ToolError):
    pass


class ToolInputError(ToolError):
    pass


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: Type[BaseModel]
    execute: Callable[[Any], Awaitable[Any]]

    def input_schema(self) -> Dict[str, Any]:
        return self.input_model.model_json_schema()


# ═══════════════════════════════════════════════════════════════════════════
#  Input models
# ═══════════════════════════════════════════════════════════════════════════


class PullRequestInput(BaseModel):
    owner: str = Field(description="Repository owner (username or organization)")
    repo: str = Field(description="Repository name")
    pull_number: int = Field(description="Pull request number")


class GetPullRequestReviewInput(PullRequestInput):
    review_id: int = Field(description="The unique identifier of the review")


class GetPullRequestReviewsInput(PullRequestInput):
    pass


class ReviewCommentDraft(BaseModel):
    path: str = Field(description="The relative path to the file being commented on")
    position: int = Field(description="The position in the diff where you want to add a review comment")
    body: str = Field(description="Text of the review comment")


class CreatePullRequestReviewInput(PullRequestInput):
    commit_id: Optional[str] = Field(default=None, description="The SHA of the commit that needs a review")
    body: str = Field(description="The body text of the review")
    event: Literal["APPROVE", "REQUEST_CHANGES", "COMMENT"] = Field(description="The review action to perform")
    comments: Optional[List[ReviewCommentDraft]] = Field(
        default=None, description="Comments to post as part of the review"
    )


class GetPullRequestThreadsInput(PullRequestInput):
    pass


class GetPullRequestReviewThreadsInput(PullRequestInput):
    review_id: int = Field(description="The unique identifier of the review")


class CheckPullRequestReviewResolutionInput(PullRequestInput):
    review_id: int = Field(description="The unique identifier of the review")


class ResolvePullRequestReviewThreadInput(PullRequestInput):
    thread_id: str = Field(description="The GraphQL node ID of the review thread to resolve")


class ResolvePullRequestReviewThreadsBatchInput(BaseModel):
    thread_ids: List[str] = Field(description="Array of GraphQL node IDs of the review threads to resolve")


class GetPullRequestThreadInput(BaseModel):
    thread_id: str = Field(description="The GraphQL node ID of the review thread")


class GetPullRequestThreadsBatchInput(BaseModel):
    thread_ids: List[str] = Field(description="Array of GraphQL node IDs of the review threads to fetch")


class GetPullRequestCommentInput(BaseModel):
    owner: str = Field(description="Repository owner (username or organization)")
    repo: str = Field(description="Repository name")
    comment_id: int = Field(description="The ID of the pull request review comment to fetch")


class GetPullRequestCommentsInput(PullRequestInput):
    pass


class ReplyToPullRequestCommentInput(PullRequestInput):
    comment_id: int = Field(description="The ID of the comment to reply to")
    body: str = Field(description="The text content of the reply")


# ═══════════════════════════════════════════════════════════════════════════
#  Entry points
# ═══════════════════════════════════════════════════════════════════════════


async def _get_pull_request_review(args: GetPullRequestReviewInput):
    return await reviews.get_pull_request_review(args.owner, args.repo, args.pull_number, args.review_id)


async def _get_pull_request_reviews(args: GetPullRequestReviewsInput):
    return await reviews.get_pull_request_reviews(args.owner, args.repo, args.pull_number)


async def _create_pull_request_review(args: CreatePullRequestReviewInput):
    return await reviews.create_pull_request_review(
        args.owner,
        args.repo,
        args.pull_number,
        body=args.body,
        event=args.event,
        commit_id=args.commit_id,
        comments=[c.model_dump() for c in args.comments] if args.comments else None,
    )


async def _get_pull_request_threads(args: GetPullRequestThreadsInput):
    return await threads.get_pull_request_threads(args.owner, args.repo, args.pull_number)


async def _get_pull_request_review_threads(args: GetPullRequestReviewThreadsInput):
    return await threads.get_pull_request_review_threads(args.owner, args.repo, args.pull_number, args.review_id)


async def _check_pull_request_review_resolution(args: CheckPullRequestReviewResolutionInput):
    return await threads.check_pull_request_review_resolution(
        args.owner, args.repo, args.pull_number, args.review_id
    )


async def _resolve_pull_request_review_thread(args: ResolvePullRequestReviewThreadInput):
    return await resolution.resolve_pull_request_review_thread(args.thread_id)


async def _resolve_pull_request_review_threads_batch(args: ResolvePullRequestReviewThreadsBatchInput):
    return await resolution.resolve_pull_request_review_threads_batch(args.thread_ids)


async def _get_pull_request_thread(args: GetPullRequestThreadInput):
    return await threads.get_pull_request_thread(args.thread_id)


async def _get_pull_request_threads_batch(args: GetPullRequestThreadsBatchInput):
    return await threads.get_pull_request_threads_batch(args.thread_ids)


async def _get_pull_request_comment(args: GetPullRequestCommentInput):
    return await comments.get_pull_request_comment(args.owner, args.repo, args.comment_id)


async def _get_pull_request_comments(args: GetPullRequestCommentsInput):
    return await comments.get_pull_request_comments(args.owner, args.repo, args.pull_number)


async def _reply_to_pull_request_comment(args: ReplyToPullRequestCommentInput):
    return await comments.reply_to_pull_request_comment(
        args.owner, args.repo, args.pull_number, args.comment_id, args.body
    )


# ═══════════════════════════════════════════════════════════════════════════
#  Registry
# ═══════════════════════════════════════════════════════════════════════════

TOOL_REGISTRY = (
    ToolSpec(
        name="get_pull_request_review",
        description="Get a specific pull request review",
        input_model=GetPullRequestReviewInput,
        execute=_get_pull_request_review,
    ),
    ToolSpec(
        name="get_pull_request_reviews",
        description="Get the reviews on a pull request",
        input_model=GetPullRequestReviewsInput,
        execute=_get_pull_request_reviews,
    ),
    ToolSpec(
        name="create_pull_request_review",
        description="Create a review on a pull request, optionally with inline comments",
        input_model=CreatePullRequestReviewInput,
        execute=_create_pull_request_review,
    ),
    ToolSpec(
        name="get_pull_request_threads",
        description="Get all review threads for a pull request in a single call",
        input_model=GetPullRequestThreadsInput,
        execute=_get_pull_request_threads,
    ),
    ToolSpec(
        name="get_pull_request_review_threads",
        description="Get the threads in a specific pull request review",
        input_model=GetPullRequestReviewThreadsInput,
        execute=_get_pull_request_review_threads,
    ),
    ToolSpec(
        name="check_pull_request_review_resolution",
        description="Check if all threads in a pull request review are resolved",
        input_model=CheckPullRequestReviewResolutionInput,
        execute=_check_pull_request_review_resolution,
    ),
    ToolSpec(
        name="resolve_pull_request_review_thread",
        description="Mark a pull request review thread as resolved",
        input_model=ResolvePullRequestReviewThreadInput,
        execute=_resolve_pull_request_review_thread,
    ),
    ToolSpec(
        name="resolve_pull_request_review_threads_batch",
        description="Resolve multiple pull request review threads in a single call",
        input_model=ResolvePullRequestReviewThreadsBatchInput,
        execute=_resolve_pull_request_review_threads_batch,
    ),
    ToolSpec(
        name="get_pull_request_thread",
        description="Get a single pull request review thread with complete comment details",
        input_model=GetPullRequestThreadInput,
        execute=_get_pull_request_thread,
    ),
    ToolSpec(
        name="get_pull_request_threads_batch",
        description="Get multiple pull request review threads with complete comment details in a single call",
        input_model=GetPullRequestThreadsBatchInput,
        execute=_get_pull_request_threads_batch,
    ),
    ToolSpec(
        name="get_pull_request_comment",
        description="Get a specific pull request review comment",
        input_model=GetPullRequestCommentInput,
        execute=_get_pull_request_comment,
    ),
    ToolSpec(
        name="get_pull_request_comments",
        description="Get the review comments on a pull request",
        input_model=GetPullRequestCommentsInput,
        execute=_get_pull_request_comments,
    ),
    ToolSpec(
        name="reply_to_pull_request_comment",
        description="Add a reply to a specific pull request review comment",
        input_model=ReplyToPullRequestCommentInput,
        execute=_reply_to_pull_request_comment,
    ),
)

_TOOLS_BY_NAME = {tool.name: tool for tool in TOOL_REGISTRY}
assert len(_TOOLS_BY_NAME) == len(TOOL_REGISTRY), "duplicate tool name in TOOL_REGISTRY"


def get_tool(name: str) -> ToolSpec:
    try:
        return _TOOLS_BY_NAME[name]
    except KeyError:
        raise UnknownToolError(f"Unknown tool: {name}") from None


def to_payload(result: Any) -> Any:
    """Convert a tool result (model, list of models, or plain data) to JSON-ready data."""
    if isinstance(result, list):
        return [to_payload(item) for item in result]
    if isinstance(result, BaseModel):
        return result.to_payload() if hasattr(result, "to_payload") else result.model_dump(mode="json")
    return result


async def dispatch(name: str, arguments: Optional[Dict[str, Any]]) -> Any:
    """
    Validate ``arguments`` against the tool's input model, run it, and
    return its JSON-ready payload.

    Raises:
        UnknownToolError: no tool named ``name``.
        ToolInputError: missing or invalid arguments.
        GitHubError, GraphQLError, ValidationError: from raising tools.
    """
    if arguments is None:
        raise ToolInputError("Arguments are required")

    tool = get_tool(name)
    try:
        args = tool.input_model.model_validate(arguments)
    except ValidationError as exc:
        issues = json.dumps(exc.errors(include_url=False), default=str)
        raise ToolInputError(f"Invalid input: {issues}") from exc

    logger.info("Calling tool %s", name)
    result = await tool.execute(args)
    return to_payload(result)
