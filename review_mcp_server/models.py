"""
Pydantic models for GitHub review data.

Three families live here:

* REST entities (``PullRequestReview``, ``PullRequestComment``) - strict
  decoders for REST payloads. A payload that does not match raises
  ``pydantic.ValidationError``.
* GraphQL nodes (``ReviewThreadNode`` and friends) - lenient decoders for the
  nested thread structure, where any level may be missing or null.
* Tool results - the typed payloads returned by the thread operations,
  serialized with GitHub's camelCase keys.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

FIRST_COMMENT_PREVIEW_CHARS = 100

ReviewState = Literal["APPROVED", "CHANGES_REQUESTED", "COMMENTED", "DISMISSED", "PENDING"]
ReviewEvent = Literal["APPROVE", "REQUEST_CHANGES", "COMMENT"]


def preview(text: Optional[str]) -> Optional[str]:
    """First ``FIRST_COMMENT_PREVIEW_CHARS`` characters of a comment body."""
    if text is None:
        return None
    return text[:FIRST_COMMENT_PREVIEW_CHARS]


# ═══════════════════════════════════════════════════════════════════════════
#  REST entities
# ═══════════════════════════════════════════════════════════════════════════


class GitHubEntity(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class GitHubUser(GitHubEntity):
    login: str
    id: int
    avatar_url: str
    url: str
    html_url: str


class PullRequestReview(GitHubEntity):
    id: int
    node_id: str
    user: GitHubUser
    body: Optional[str]
    state: ReviewState
    html_url: str
    pull_request_url: str
    commit_id: str
    submitted_at: Optional[str]
    author_association: str


class Href(GitHubEntity):
    href: str


class CommentLinks(GitHubEntity):
    self_link: Href = Field(alias="self")
    html: Href
    pull_request: Href


class PullRequestComment(GitHubEntity):
    url: str
    id: int
    node_id: str
    pull_request_review_id: Optional[int]
    diff_hunk: str
    path: Optional[str]
    position: Optional[int]
    original_position: Optional[int]
    commit_id: str
    original_commit_id: str
    user: GitHubUser
    body: str
    created_at: str
    updated_at: str
    html_url: str
    pull_request_url: str
    author_association: str
    links: CommentLinks = Field(alias="_links")


# ═══════════════════════════════════════════════════════════════════════════
#  GraphQL nodes
# ═══════════════════════════════════════════════════════════════════════════


class GraphQLModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Actor(GraphQLModel):
    login: Optional[str] = None


class ReviewRef(GraphQLModel):
    id: Optional[str] = None
    database_id: Optional[int] = None


class ThreadCommentNode(GraphQLModel):
    id: Optional[str] = None
    database_id: Optional[int] = None
    body_text: Optional[str] = None
    created_at: Optional[str] = None
    author: Optional[Actor] = None
    pull_request_review: Optional[ReviewRef] = None

    @property
    def review_database_id(self) -> Optional[int]:
        if self.pull_request_review is None:
            return None
        return self.pull_request_review.database_id

    @property
    def author_login(self) -> Optional[str]:
        return self.author.login if self.author else None


class CommentConnection(GraphQLModel):
    nodes: List[ThreadCommentNode] = Field(default_factory=list)

    @field_validator("nodes", mode="before")
    @classmethod
    def _drop_null_nodes(cls, value: Any) -> Any:
        if value is None:
            return []
        return [node for node in value if node is not None]


class ReviewThreadNode(GraphQLModel):
    id: Optional[str] = None
    is_resolved: bool = False
    comments: CommentConnection = Field(default_factory=CommentConnection)

    @field_validator("comments", mode="before")
    @classmethod
    def _default_comments(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def first_comment(self) -> Optional[ThreadCommentNode]:
        return self.comments.nodes[0] if self.comments.nodes else None

    def belongs_to_review(self, review_id: int) -> bool:
        """True when any loaded comment was posted under ``review_id``."""
        return any(c.review_database_id == review_id for c in self.comments.nodes)


class ThreadConnection(GraphQLModel):
    nodes: List[ReviewThreadNode] = Field(default_factory=list)

    @field_validator("nodes", mode="before")
    @classmethod
    def _drop_null_nodes(cls, value: Any) -> Any:
        if value is None:
            return []
        return [node for node in value if node is not None]


# ═══════════════════════════════════════════════════════════════════════════
#  Tool results
# ═══════════════════════════════════════════════════════════════════════════


class ToolResult(GraphQLModel):
    """Base for result payloads; unset optional fields are left out."""

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ThreadSummary(ToolResult):
    id: str
    is_resolved: bool
    review_id: Optional[int] = None
    first_comment: Optional[str] = None


class ReviewThreadsResult(ToolResult):
    threads: List[ThreadSummary] = Field(default_factory=list)
    success: bool
    error: Optional[str] = None


class UnresolvedThread(ToolResult):
    id: str
    first_comment: Optional[str] = None


class ReviewResolutionStatus(ToolResult):
    all_resolved: bool
    total_threads: int
    resolved_threads: int
    unresolved_threads: List[UnresolvedThread] = Field(default_factory=list)
    success: bool
    error: Optional[str] = None


class ThreadComment(ToolResult):
    id: Optional[str] = None
    database_id: Optional[int] = None
    body: Optional[str] = None
    author: Optional[str] = None
    created_at: Optional[str] = None
    review_id: Optional[int] = None

    @classmethod
    def from_node(cls, node: ThreadCommentNode) -> "ThreadComment":
        return cls(
            id=node.id,
            database_id=node.database_id,
            body=node.body_text,
            author=node.author_login,
            created_at=node.created_at,
            review_id=node.review_database_id,
        )


class ReviewThread(ToolResult):
    id: str
    is_resolved: bool
    comments: List[ThreadComment] = Field(default_factory=list)

    @classmethod
    def from_node(cls, node: ReviewThreadNode) -> "ReviewThread":
        return cls(
            id=node.id,
            is_resolved=node.is_resolved,
            comments=[ThreadComment.from_node(c) for c in node.comments.nodes],
        )


class ThreadResult(ToolResult):
    thread: Optional[ReviewThread] = None
    success: bool
    message: str

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload.setdefault("thread", None)
        return payload


class ThreadError(ToolResult):
    thread_id: str
    message: str


class ThreadsBatchResult(ToolResult):
    threads: List[ReviewThread] = Field(default_factory=list)
    errors: List[ThreadError] = Field(default_factory=list)
    success: bool


class ResolveThreadResult(ToolResult):
    success: bool
    message: str


class ResolveThreadOutcome(ResolveThreadResult):
    thread_id: str


class ResolveThreadsBatchResult(ToolResult):
    results: List[ResolveThreadOutcome] = Field(default_factory=list)
    all_succeeded: bool
    success_count: int
    failure_count: int
