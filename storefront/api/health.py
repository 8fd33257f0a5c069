"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
"""

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


class ReadyResponse(BaseModel):
    """Readiness response schema."""

    status: str
    contact_configured: bool


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    from storefront.infrastructure.config import settings

    return HealthResponse(
        status="healthy",
        service=settings.service_name,
        version=settings.api_version,
    )


@router.get("/ready", response_model=ReadyResponse, tags=["Health"])
async def readiness_check(request: Request) -> ReadyResponse:
    """Check if service is ready to accept requests.

    Returns:
        Readiness status and whether a WhatsApp number is configured.
    """
    credentials = getattr(request.app.state, "store_credentials", None)
    contact_configured = bool(
        credentials and (credentials.whatsapp_retail or credentials.whatsapp_reseller)
    )
    return ReadyResponse(status="ready", contact_configured=contact_configured)
