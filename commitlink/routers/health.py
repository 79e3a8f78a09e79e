"""Health check endpoint with database connectivity verification."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from commitlink.config import settings
from commitlink.db.session import get_db_session
from commitlink.schemas.health import HealthResponse

router = APIRouter()

DBSession = Annotated[AsyncSession, Depends(get_db_session)]


@router.get("/healthz", response_model=HealthResponse)
async def healthz(db: DBSession) -> HealthResponse:
    """Report liveness plus whether the database answers ``SELECT 1``.

    Database errors propagate and become a 500 via the global handler.
    """
    await db.execute(text("SELECT 1"))
    return HealthResponse(
        status="ok",
        database="connected",
        signature_verification=bool(settings.github_webhook_secret),
    )
