"""Result models produced by the linking engine.

Serialized with camelCase aliases, which is the shape webhook senders and
the board frontend already consume.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class LinkStatus(str, Enum):
    LINKED = "linked"
    SKIPPED = "skipped"
    FAILED = "failed"


class LinkSource(str, Enum):
    BRANCH = "branch"
    COMMIT = "commit"
    BOTH = "both"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CommitLinkResult(_CamelModel):
    """Outcome of linking one commit of a push."""

    commit_sha: str
    commit_message: str | None = None
    status: LinkStatus = LinkStatus.SKIPPED
    source: LinkSource | None = None
    reason: str | None = None
    linked_task_ids: list[int] = Field(default_factory=list)


class WebhookResult(_CamelModel):
    """Aggregate outcome of one push.

    ``error`` is set only when the push could not be processed at all, in
    which case ``commit_results`` is empty.
    """

    team_id: int | None = None
    team_name: str | None = None
    error: str | None = None
    commit_results: list[CommitLinkResult] = Field(default_factory=list)

    def _count(self, status: LinkStatus) -> int:
        return sum(1 for r in self.commit_results if r.status == status)

    @computed_field(alias="linkedCount")
    @property
    def linked_count(self) -> int:
        return self._count(LinkStatus.LINKED)

    @computed_field(alias="skippedCount")
    @property
    def skipped_count(self) -> int:
        return self._count(LinkStatus.SKIPPED)

    @computed_field(alias="failedCount")
    @property
    def failed_count(self) -> int:
        return self._count(LinkStatus.FAILED)


class WebhookResponse(_CamelModel):
    """Body returned to the webhook sender after a processed push."""

    success: bool = True
    team_id: int | None = None
    team_name: str | None = None
    linked: int
    skipped: int
    commits: list[CommitLinkResult]

    @classmethod
    def from_result(cls, result: WebhookResult) -> "WebhookResponse":
        return cls(
            team_id=result.team_id,
            team_name=result.team_name,
            linked=result.linked_count,
            skipped=result.skipped_count,
            commits=result.commit_results,
        )
