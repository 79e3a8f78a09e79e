"""Pydantic response models for the health check endpoint."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response model for the /healthz endpoint.

    ``signature_verification`` is False when the service runs in open mode.
    """

    status: str
    database: str
    signature_verification: bool
