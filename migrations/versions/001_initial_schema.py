"""Initial schema: teams, tasks, task_assignees, task_commits.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create team, task, assignee and task/commit link tables."""
    # --- teams table ---
    op.create_table(
        "teams",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("github_repo_url", sa.String(512), nullable=True),
    )
    op.create_index("ix_teams_github_repo_url", "teams", ["github_repo_url"])

    # --- tasks table ---
    op.create_table(
        "tasks",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "team_id",
            sa.Integer,
            sa.ForeignKey("teams.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("created_by", sa.Integer, nullable=True),
    )

    # --- task_assignees table ---
    op.create_table(
        "task_assignees",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "task_id",
            sa.Integer,
            sa.ForeignKey("tasks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("member_id", sa.Integer, nullable=False),
        sa.UniqueConstraint("task_id", "member_id", name="uq_task_assignees_task_member"),
    )

    # --- task_commits table ---
    # The (task_id, commit_sha) constraint is what makes webhook redelivery a no-op
    op.create_table(
        "task_commits",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "task_id",
            sa.Integer,
            sa.ForeignKey("tasks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("commit_sha", sa.String(64), nullable=False),
        sa.Column("commit_message", sa.Text, nullable=True),
        sa.Column("commit_author", sa.String(255), nullable=True),
        sa.Column("commit_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("github_url", sa.String(1024), nullable=True),
        sa.Column("linked_by", sa.Integer, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint("task_id", "commit_sha", name="uq_task_commits_task_sha"),
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table("task_commits")
    op.drop_table("task_assignees")
    op.drop_table("tasks")
    op.drop_index("ix_teams_github_repo_url", table_name="teams")
    op.drop_table("teams")
