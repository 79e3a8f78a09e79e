"""Pydantic models for task-facing payloads: notices and link listings."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class CommitLinkedNotice(BaseModel):
    """Payload telling one member that a commit was linked to a task.

    Enqueued once per recipient; delivery (email, in-app) happens downstream.
    """

    recipient_id: int
    task_id: int
    task_title: str
    commit_message: str | None = None
    from_branch: bool = False
    team_id: int


class TaskView(BaseModel):
    """Read-only view of a task as seen by the linking engine."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    team_id: int
    title: str
    created_by: int | None = None


class TeamView(BaseModel):
    """Read-only view of a team resolved from a repository URL."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    github_repo_url: str | None = None


class NewTaskCommit(BaseModel):
    """Values for a task/commit link about to be stored."""

    task_id: int
    commit_sha: str
    commit_message: str | None = None
    commit_author: str | None = None
    commit_date: datetime | None = None
    github_url: str | None = None
    linked_by: int | None = None


class TaskCommitOut(NewTaskCommit):
    """A stored task/commit link returned by GET /tasks/{task_id}/commits."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime | None = None
