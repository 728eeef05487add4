"""Health check API endpoint."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from doh_gateway.core.config import Settings, get_settings

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    upstream: str
    tls: bool


@router.get("/healthcheck", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """
    Health check endpoint (no auth required).

    Reports the configured upstream and whether the listener serves TLS. The
    upstream itself is not queried.
    """
    return HealthResponse(
        status="ok",
        upstream=settings.upstream,
        tls=settings.use_tls,
    )
