"""Pydantic models for GitHub push webhook payloads.

Unknown fields are ignored so new GitHub payload keys never break decoding.
"""

from pydantic import BaseModel, ConfigDict, Field

BRANCH_REF_PREFIX = "refs/heads/"


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore")


class CommitAuthor(_Lenient):
    """Author or committer identity attached to a commit."""

    name: str | None = None
    email: str | None = None
    username: str | None = None


class Commit(_Lenient):
    """A single commit within a push event."""

    id: str
    message: str = ""
    timestamp: str | None = None
    url: str | None = None
    author: CommitAuthor = Field(default_factory=CommitAuthor)
    committer: CommitAuthor | None = None
    added: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)
    modified: list[str] = Field(default_factory=list)


class Repository(_Lenient):
    """Repository metadata from the webhook payload."""

    id: int
    name: str
    full_name: str
    html_url: str | None = None
    clone_url: str | None = None


class Pusher(_Lenient):
    """Whoever performed the push."""

    name: str | None = None
    email: str | None = None


class PushEvent(_Lenient):
    """GitHub push webhook event payload.

    Reference: https://docs.github.com/en/webhooks/webhook-events-and-payloads#push
    """

    ref: str
    before: str | None = None
    after: str | None = None
    repository: Repository
    pusher: Pusher | None = None
    commits: list[Commit] = Field(default_factory=list)

    @property
    def branch_name(self) -> str:
        """The ref without its ``refs/heads/`` prefix.

        Refs outside ``refs/heads/`` (tags, notes) are returned unchanged.
        """
        if self.ref.startswith(BRANCH_REF_PREFIX):
            return self.ref[len(BRANCH_REF_PREFIX) :]
        return self.ref
