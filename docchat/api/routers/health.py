"""
Health check API endpoints.

Routes: GET /health, GET /ping

Dependencies: fastapi
System role: Liveness probes
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str
    ts: datetime


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy", ts=datetime.now(timezone.utc))


@router.get("/ping", response_class=PlainTextResponse)
async def ping() -> str:
    """Plain-text liveness probe."""
    return "OK\n"
