"""Centralized FastAPI dependencies for use with Depends()."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from commitlink.db.session import get_db_session
from commitlink.services.link_store import LinkStore, SqlLinkStore
from commitlink.services.notifier import InMemoryNotifier, Notifier

_notifier: Notifier = InMemoryNotifier()


def init_production_deps(
    gcp_project: str,
    gcp_location: str,
    cloud_tasks_queue: str,
    notification_handler_url: str,
) -> None:
    """Swap the in-memory notifier for the Cloud Tasks backed one.

    Uses a lazy import so the module loads without the GCP SDK installed.
    """
    global _notifier  # noqa: PLW0603

    from commitlink.services.notifier import CloudTasksNotifier

    _notifier = CloudTasksNotifier(
        gcp_project, gcp_location, cloud_tasks_queue, notification_handler_url
    )


def get_notifier() -> Notifier:
    """Return the application notifier.

    Defaults to ``InMemoryNotifier`` for development and testing.
    """
    return _notifier


async def get_link_store(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> LinkStore:
    """Return a ``SqlLinkStore`` bound to the request's session."""
    return SqlLinkStore(session)


__all__ = [
    "get_db_session",
    "get_link_store",
    "get_notifier",
    "init_production_deps",
]
