"""SQLAlchemy ORM models for teams, tasks and their linked commits.

Teams, tasks and assignees are owned by the wider application; this service
only reads them. ``TaskCommit`` rows are the one thing it writes.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class Team(Base):
    """A team, optionally bound to one GitHub repository."""

    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    # Stored normalized: no trailing ".git", no trailing "/"
    github_repo_url: Mapped[str | None] = mapped_column(String(512), default=None)

    __table_args__ = (Index("ix_teams_github_repo_url", "github_repo_url"),)


class Task(Base):
    """A work item that commits can be linked to."""

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(primary_key=True)
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id", ondelete="CASCADE"))
    title: Mapped[str] = mapped_column(String(255))
    created_by: Mapped[int | None] = mapped_column(default=None)


class TaskAssignee(Base):
    """A member assigned to a task."""

    __tablename__ = "task_assignees"

    id: Mapped[int] = mapped_column(primary_key=True)
    task_id: Mapped[int] = mapped_column(ForeignKey("tasks.id", ondelete="CASCADE"))
    member_id: Mapped[int]

    __table_args__ = (
        UniqueConstraint("task_id", "member_id", name="uq_task_assignees_task_member"),
    )


class TaskCommit(Base):
    """A commit linked to a task, unique per (task, sha)."""

    __tablename__ = "task_commits"

    id: Mapped[int] = mapped_column(primary_key=True)
    task_id: Mapped[int] = mapped_column(ForeignKey("tasks.id", ondelete="CASCADE"))
    commit_sha: Mapped[str] = mapped_column(String(64))
    commit_message: Mapped[str | None] = mapped_column(Text, default=None)
    commit_author: Mapped[str | None] = mapped_column(String(255), default=None)
    commit_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    github_url: Mapped[str | None] = mapped_column(String(1024), default=None)
    # None for links created by the webhook rather than by a member
    linked_by: Mapped[int | None] = mapped_column(default=None)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint("task_id", "commit_sha", name="uq_task_commits_task_sha"),
    )
