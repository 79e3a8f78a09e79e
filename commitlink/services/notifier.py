"""Commit-linked notifications with protocol-based swappable notifiers.

``fan_out_commit_linked`` decides who hears about a new link; a ``Notifier``
only carries each notice away. Production code uses ``CloudTasksNotifier``,
which hands every notice to Cloud Tasks as an HTTP POST for the delivery
service and wraps the synchronous ``google-cloud-tasks`` client in
``asyncio.to_thread``. Tests use ``InMemoryNotifier``.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

import structlog

from commitlink.schemas.results import LinkSource
from commitlink.schemas.tasks import CommitLinkedNotice, TaskView

logger = structlog.get_logger()


class Notifier(Protocol):
    """Protocol for dispatching one notice to one recipient."""

    async def notify(self, notice: CommitLinkedNotice) -> str:
        """Dispatch *notice* and return an identifier for it."""
        ...


class CloudTasksNotifier:
    """Production implementation backed by Google Cloud Tasks.

    The ``google.cloud.tasks_v2`` client is imported lazily so the module can
    be loaded without the GCP SDK installed.
    """

    def __init__(self, project: str, location: str, queue: str, handler_url: str) -> None:
        from google.cloud import tasks_v2

        self._client = tasks_v2.CloudTasksClient()
        self._parent = self._client.queue_path(project, location, queue)
        self._handler_url = handler_url

    async def notify(self, notice: CommitLinkedNotice) -> str:
        """Create an HTTP POST Cloud Task carrying the notice and return its name."""
        from google.cloud import tasks_v2

        task = tasks_v2.Task(
            http_request=tasks_v2.HttpRequest(
                http_method=tasks_v2.HttpMethod.POST,
                url=self._handler_url,
                headers={"Content-Type": "application/json"},
                body=notice.model_dump_json().encode(),
            ),
        )
        response = await asyncio.to_thread(
            self._client.create_task,
            tasks_v2.CreateTaskRequest(parent=self._parent, task=task),
        )
        return response.name


class InMemoryNotifier:
    """Test double that records dispatched notices for assertions."""

    def __init__(self) -> None:
        self.notices: list[CommitLinkedNotice] = []

    async def notify(self, notice: CommitLinkedNotice) -> str:
        """Append the notice and return a fake identifier."""
        self.notices.append(notice)
        return f"fake-notice-{len(self.notices)}"


def notice_recipients(assignee_ids: list[int], created_by: int | None) -> list[int]:
    """Assignees in order, then the creator unless already assigned."""
    recipients = list(dict.fromkeys(assignee_ids))
    if created_by is not None and created_by not in recipients:
        recipients.append(created_by)
    return recipients


async def fan_out_commit_linked(
    notifier: Notifier,
    *,
    task: TaskView,
    assignee_ids: list[int],
    commit_message: str | None,
    source: LinkSource | None,
) -> int:
    """Send one notice per recipient of a newly linked task.

    A recipient whose dispatch fails is logged and skipped; the others are
    still notified.

    Returns:
        The number of notices dispatched.
    """
    from_branch = source in (LinkSource.BRANCH, LinkSource.BOTH)
    sent = 0
    for recipient_id in notice_recipients(assignee_ids, task.created_by):
        notice = CommitLinkedNotice(
            recipient_id=recipient_id,
            task_id=task.id,
            task_title=task.title,
            commit_message=commit_message,
            from_branch=from_branch,
            team_id=task.team_id,
        )
        try:
            await notifier.notify(notice)
        except Exception:
            logger.exception("notice_dispatch_failed", task_id=task.id, recipient_id=recipient_id)
            continue
        sent += 1
    return sent
