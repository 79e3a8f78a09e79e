"""Admin router for re-running pushes through the linking engine.

Meant for debugging and for replaying deliveries GitHub gave up on. Protected
by the API key middleware instead of a webhook signature.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends

from commitlink.dependencies import get_link_store, get_notifier
from commitlink.schemas.results import WebhookResult
from commitlink.schemas.webhooks import PushEvent
from commitlink.services.link_store import LinkStore
from commitlink.services.linker import process_push
from commitlink.services.notifier import Notifier

logger = structlog.get_logger()

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/sync")
async def manual_sync(
    payload: PushEvent,
    store: Annotated[LinkStore, Depends(get_link_store)],
    notifier: Annotated[Notifier, Depends(get_notifier)],
) -> WebhookResult:
    """Process a push payload exactly as the webhook would, minus the signature.

    Returns the full ``WebhookResult``, including a top-level ``error`` when
    the repository belongs to no team.
    """
    logger.info("manual_sync_triggered", repo=payload.repository.full_name, ref=payload.ref)
    return await process_push(payload, store, notifier)
