"""
Health Check Endpoints
"""

from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Request, Response
from pydantic import BaseModel

from superstore_analytics.config import get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, Any]


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request, response: Response) -> HealthResponse:
    """Application status and dataset availability"""
    settings = get_settings()
    engine = getattr(request.app.state, "engine", None)

    if engine is None:
        checks = {"dataset": {"status": "unavailable"}}
        status = "degraded"
        response.status_code = 503
    else:
        checks = {"dataset": {"status": "loaded", "rows": engine.data.height}}
        status = "healthy"

    return HealthResponse(
        status=status,
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.utcnow(),
        checks=checks,
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    """Returns 200 if the application is running."""
    return {"status": "alive"}
