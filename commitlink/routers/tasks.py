"""Task router exposing the commits linked to a task."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from commitlink.dependencies import get_link_store
from commitlink.schemas.tasks import TaskCommitOut
from commitlink.services.link_store import LinkStore

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("/{task_id}/commits")
async def list_task_commits(
    task_id: int,
    store: Annotated[LinkStore, Depends(get_link_store)],
) -> list[TaskCommitOut]:
    """Return the commits linked to a task, newest first.

    Raises:
        HTTPException: 404 if the task does not exist.
    """
    if await store.get_task(task_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Task not found: {task_id}",
        )
    return await store.list_links_for_task(task_id)
