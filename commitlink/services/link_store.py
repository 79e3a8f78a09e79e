"""Persistence boundary for teams, tasks and task/commit links.

Production code uses ``SqlLinkStore`` on top of the request's
``AsyncSession``. Tests and local runs use ``InMemoryLinkStore``, which keeps
the same idempotency rules without a database.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from commitlink.db.models import Task, TaskAssignee, TaskCommit, Team
from commitlink.schemas.tasks import NewTaskCommit, TaskCommitOut, TaskView, TeamView


class LinkStore(Protocol):
    """Protocol for the reads and writes the linking engine needs."""

    async def find_team_by_repo_url(self, normalized_url: str) -> TeamView | None: ...

    async def get_task(self, task_id: int) -> TaskView | None: ...

    async def list_assignee_ids(self, task_id: int) -> list[int]: ...

    async def link_exists(self, task_id: int, commit_sha: str) -> bool: ...

    async def insert_link(self, link: NewTaskCommit) -> bool:
        """Store *link* unless the (task, sha) pair is already present.

        Returns ``True`` when a row was written and ``False`` when another
        writer got there first.
        """
        ...

    async def list_links_for_task(self, task_id: int) -> list[TaskCommitOut]: ...

    def savepoint(self) -> AbstractAsyncContextManager[None]:
        """Scope one candidate's reads and writes.

        An error raised inside the block undoes only that block's work and
        leaves the enclosing transaction usable.
        """
        ...


class SqlLinkStore:
    """``LinkStore`` backed by PostgreSQL through SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_team_by_repo_url(self, normalized_url: str) -> TeamView | None:
        result = await self._session.execute(
            select(Team).where(Team.github_repo_url == normalized_url).order_by(Team.id).limit(1)
        )
        team = result.scalar_one_or_none()
        return TeamView.model_validate(team) if team is not None else None

    async def get_task(self, task_id: int) -> TaskView | None:
        task = await self._session.get(Task, task_id)
        return TaskView.model_validate(task) if task is not None else None

    async def list_assignee_ids(self, task_id: int) -> list[int]:
        result = await self._session.execute(
            select(TaskAssignee.member_id)
            .where(TaskAssignee.task_id == task_id)
            .order_by(TaskAssignee.id)
        )
        return list(result.scalars().all())

    async def link_exists(self, task_id: int, commit_sha: str) -> bool:
        result = await self._session.execute(
            select(func.count())
            .select_from(TaskCommit)
            .where(TaskCommit.task_id == task_id, TaskCommit.commit_sha == commit_sha)
        )
        return result.scalar_one() > 0

    async def insert_link(self, link: NewTaskCommit) -> bool:
        """Insert with ON CONFLICT DO NOTHING inside a savepoint.

        The savepoint keeps a failed insert from aborting the surrounding
        request transaction, so sibling candidates can still be stored.
        """
        stmt = (
            pg_insert(TaskCommit)
            .values(**link.model_dump())
            .on_conflict_do_nothing(constraint="uq_task_commits_task_sha")
            .returning(TaskCommit.id)
        )
        async with self._session.begin_nested():
            result = await self._session.execute(stmt)
            return result.scalar_one_or_none() is not None

    async def list_links_for_task(self, task_id: int) -> list[TaskCommitOut]:
        result = await self._session.execute(
            select(TaskCommit)
            .where(TaskCommit.task_id == task_id)
            .order_by(TaskCommit.created_at.desc(), TaskCommit.id.desc())
        )
        return [TaskCommitOut.model_validate(row) for row in result.scalars().all()]

    @asynccontextmanager
    async def savepoint(self) -> AsyncIterator[None]:
        async with self._session.begin_nested():
            yield


class InMemoryLinkStore:
    """Test double holding teams, tasks and links in dictionaries."""

    def __init__(self) -> None:
        self.teams: dict[int, TeamView] = {}
        self.tasks: dict[int, TaskView] = {}
        self.assignees: dict[int, list[int]] = {}
        self.links: list[TaskCommitOut] = []

    def add_team(self, team_id: int, name: str, github_repo_url: str | None) -> TeamView:
        team = TeamView(id=team_id, name=name, github_repo_url=github_repo_url)
        self.teams[team_id] = team
        return team

    def add_task(
        self,
        task_id: int,
        team_id: int,
        title: str,
        *,
        created_by: int | None = None,
        assignees: list[int] | None = None,
    ) -> TaskView:
        task = TaskView(id=task_id, team_id=team_id, title=title, created_by=created_by)
        self.tasks[task_id] = task
        self.assignees[task_id] = list(assignees or [])
        return task

    async def find_team_by_repo_url(self, normalized_url: str) -> TeamView | None:
        for team_id in sorted(self.teams):
            if self.teams[team_id].github_repo_url == normalized_url:
                return self.teams[team_id]
        return None

    async def get_task(self, task_id: int) -> TaskView | None:
        return self.tasks.get(task_id)

    async def list_assignee_ids(self, task_id: int) -> list[int]:
        return list(self.assignees.get(task_id, []))

    async def link_exists(self, task_id: int, commit_sha: str) -> bool:
        return any(
            link.task_id == task_id and link.commit_sha == commit_sha for link in self.links
        )

    async def insert_link(self, link: NewTaskCommit) -> bool:
        if await self.link_exists(link.task_id, link.commit_sha):
            return False
        self.links.append(
            TaskCommitOut(
                id=len(self.links) + 1,
                created_at=datetime.now(timezone.utc),
                **link.model_dump(),
            )
        )
        return True

    async def list_links_for_task(self, task_id: int) -> list[TaskCommitOut]:
        rows = [link for link in self.links if link.task_id == task_id]
        return sorted(rows, key=lambda link: link.id, reverse=True)

    @asynccontextmanager
    async def savepoint(self) -> AsyncIterator[None]:
        yield
