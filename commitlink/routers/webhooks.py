"""GitHub webhook router: signature check, event dispatch and commit linking."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse

from commitlink.config import settings
from commitlink.dependencies import get_link_store, get_notifier
from commitlink.logging_config import bind_delivery_context
from commitlink.schemas.results import WebhookResponse
from commitlink.services.link_store import LinkStore
from commitlink.services.linker import process_push
from commitlink.services.notifier import Notifier
from commitlink.services.payload import DecodeError, parse_push_event
from commitlink.services.signature import verify_signature

logger = structlog.get_logger()

router = APIRouter(prefix="/webhooks", tags=["webhooks"])

PING_RESPONSE = {"message": "pong", "status": "Webhook configured successfully"}


async def verify_github_signature(
    request: Request,
    x_hub_signature_256: Annotated[str | None, Header()] = None,
) -> bytes:
    """Verify the delivery's HMAC-SHA256 signature against the raw body.

    Returns the raw body bytes so the route can decode the payload without
    reading the stream twice. With no secret configured, every delivery
    passes.

    Raises:
        HTTPException: 401 if the signature is missing or does not match.
    """
    body = await request.body()
    if not verify_signature(body, x_hub_signature_256, settings.github_webhook_secret):
        logger.warning("webhook_signature_invalid")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid signature",
        )
    return body


async def bind_delivery(
    x_github_event: Annotated[str | None, Header()] = None,
    x_github_delivery: Annotated[str | None, Header()] = None,
) -> str | None:
    """Bind delivery metadata for logging and return the event type."""
    bind_delivery_context(event=x_github_event, delivery_id=x_github_delivery)
    logger.info("webhook_received")
    return x_github_event


@router.post("/github")
async def github_webhook(
    event: Annotated[str | None, Depends(bind_delivery)],
    raw_body: Annotated[bytes, Depends(verify_github_signature)],
    store: Annotated[LinkStore, Depends(get_link_store)],
    notifier: Annotated[Notifier, Depends(get_notifier)],
) -> dict:
    """Receive a GitHub webhook delivery.

    ``ping`` is acknowledged, other non-push events are ignored, and push
    events have their commits linked to the tasks they reference.
    """
    if event == "ping":
        return PING_RESPONSE

    if event != "push":
        logger.info("webhook_event_ignored")
        return {"message": "Event ignored", "event": event}

    try:
        payload = parse_push_event(raw_body)
    except DecodeError as exc:
        logger.warning("webhook_payload_invalid", error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid payload format",
        ) from None

    result = await process_push(payload, store, notifier)

    if result.error is not None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": result.error},
        )

    return WebhookResponse.from_result(result).model_dump(mode="json", by_alias=True)


@router.post("/github/ping")
async def github_ping() -> dict:
    """Static acknowledgement used when configuring the webhook."""
    return PING_RESPONSE
